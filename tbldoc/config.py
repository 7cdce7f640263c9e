"""Configuration of schema documentation: loading, validation and schema enrichment."""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

import yaml
from packaging.version import InvalidVersion, Version

from .lint import Lint
from .model import (
    HIDEABLE_COLUMNS,
    Cardinality,
    NotFoundError,
    Relation,
    Schema,
    to_cardinality,
)
from .naming import NamingStrategy

DEFAULT_DOC_PATH = "dbdoc"
DEFAULT_CONFIG_FILE_PATHS = (".tbls.yml", "tbls.yml")
DEFAULT_ER_FORMAT = "svg"
SUPPORT_ER_FORMAT = ("png", "jpg", "svg", "mermaid")
SCHEMA_FILE_NAME = "schema.json"
DEFAULT_ER_DISTANCE = 1
VERSION = "0.1.0"

_MASK = "*****"


class ConfigError(ValueError):
    """Raised when a configuration cannot be loaded, validated or applied."""


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _mapping(value: Any) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError(f"expected a mapping, got {value!r}")
    return value


def _strings(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise TypeError(f"expected a list, got {value!r}")
    return [_text(item) for item in value]


def _str_map(value: Any) -> dict[str, str]:
    return {_text(key): _text(item) for key, item in _mapping(value).items()}


def _items(value: Any) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"expected a list, got {value!r}")
    return value


@dataclass
class DSN:
    """Data source name, optionally with HTTP headers."""

    url: str = ""
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def _from_yaml(cls, value: Any) -> DSN:
        if value is None:
            return cls()
        if isinstance(value, str):
            return cls(url=value)
        data = _mapping(value)
        return cls(url=_text(data.get("url")), headers=_str_map(data.get("headers")))


@dataclass
class Format:
    """Document format settings."""

    adjust: bool = False
    sort: bool = False
    number: bool = False
    show_only_first_paragraph: bool = False
    hide_columns_without_values: list[str] = field(default_factory=list)

    @classmethod
    def _from_yaml(cls, value: Any) -> Format:
        data = _mapping(value)
        hide = data.get("hideColumnsWithoutValues")
        if hide is True:
            hidden = list(HIDEABLE_COLUMNS)
        elif isinstance(hide, list):
            hidden = [_text(item) for item in hide]
        else:
            hidden = []
        return cls(
            adjust=bool(data.get("adjust")),
            sort=bool(data.get("sort")),
            number=bool(data.get("number")),
            show_only_first_paragraph=bool(data.get("showOnlyFirstParagraph")),
            hide_columns_without_values=hidden,
        )


@dataclass
class ShowColumnTypes:
    """Which kinds of columns an ER diagram shows."""

    related: bool = False
    primary: bool = False


@dataclass
class ER:
    """ER diagram settings."""

    skip: bool = False
    format: str = ""
    comment: bool = False
    hide_def: bool = False
    show_column_types: ShowColumnTypes | None = None
    distance: int | None = None
    font: str = ""

    def _update(self, value: Any) -> None:
        data = _mapping(value)
        if "skip" in data:
            self.skip = bool(data["skip"])
        if "format" in data:
            self.format = _text(data["format"])
        if "comment" in data:
            self.comment = bool(data["comment"])
        if "hideDef" in data:
            self.hide_def = bool(data["hideDef"])
        if "showColumnTypes" in data:
            types = data["showColumnTypes"]
            if types is None:
                self.show_column_types = None
            else:
                types = _mapping(types)
                self.show_column_types = ShowColumnTypes(
                    related=bool(types.get("related")), primary=bool(types.get("primary"))
                )
        if "distance" in data:
            self.distance = None if data["distance"] is None else int(data["distance"])
        if "font" in data:
            self.font = _text(data["font"])


@dataclass
class AdditionalRelation:
    """A relation declared in the configuration rather than the database."""

    table: str = ""
    columns: list[str] = field(default_factory=list)
    cardinality: str = ""
    parent_table: str = ""
    parent_columns: list[str] = field(default_factory=list)
    parent_cardinality: str = ""
    definition: str = ""
    override: bool = False

    @classmethod
    def _from_yaml(cls, value: Any) -> AdditionalRelation:
        data = _mapping(value)
        return cls(
            table=_text(data.get("table")),
            columns=_strings(data.get("columns")),
            cardinality=_text(data.get("cardinality")),
            parent_table=_text(data.get("parentTable")),
            parent_columns=_strings(data.get("parentColumns")),
            parent_cardinality=_text(data.get("parentCardinality")),
            definition=_text(data.get("def")),
            override=bool(data.get("override")),
        )


@dataclass
class AdditionalComment:
    """Comments and labels declared in the configuration for one table."""

    table: str = ""
    table_comment: str = ""
    column_comments: dict[str, str] = field(default_factory=dict)
    column_labels: dict[str, list[str]] = field(default_factory=dict)
    index_comments: dict[str, str] = field(default_factory=dict)
    constraint_comments: dict[str, str] = field(default_factory=dict)
    trigger_comments: dict[str, str] = field(default_factory=dict)
    labels: list[str] = field(default_factory=list)

    @classmethod
    def _from_yaml(cls, value: Any) -> AdditionalComment:
        data = _mapping(value)
        return cls(
            table=_text(data.get("table")),
            table_comment=_text(data.get("tableComment")),
            column_comments=_str_map(data.get("columnComments")),
            column_labels={
                _text(key): _strings(labels)
                for key, labels in _mapping(data.get("columnLabels")).items()
            },
            index_comments=_str_map(data.get("indexComments")),
            constraint_comments=_str_map(data.get("constraintComments")),
            trigger_comments=_str_map(data.get("triggerComments")),
            labels=_strings(data.get("labels")),
        )


@dataclass
class DetectVirtualRelations:
    """Whether and how to guess relations from column names."""

    enabled: bool = False
    strategy: str = ""

    @classmethod
    def _from_yaml(cls, value: Any) -> DetectVirtualRelations:
        data = _mapping(value)
        return cls(enabled=bool(data.get("enabled")), strategy=_text(data.get("strategy")))


@dataclass
class MDTemplates:
    """Paths of Markdown templates that replace the built-in ones."""

    index: str = ""
    table: str = ""
    viewpoint: str = ""


@dataclass
class DotTemplates:
    """Paths of dot templates that replace the built-in ones."""

    schema: str = ""
    table: str = ""


@dataclass
class PUMLTemplates:
    """Paths of PlantUML templates that replace the built-in ones."""

    schema: str = ""
    table: str = ""


@dataclass
class MermaidTemplates:
    """Paths of Mermaid templates that replace the built-in ones."""

    schema: str = ""
    table: str = ""


@dataclass
class Templates:
    """Template overrides for every output."""

    md: MDTemplates = field(default_factory=MDTemplates)
    dot: DotTemplates = field(default_factory=DotTemplates)
    puml: PUMLTemplates = field(default_factory=PUMLTemplates)
    mermaid: MermaidTemplates = field(default_factory=MermaidTemplates)

    @classmethod
    def _from_yaml(cls, value: Any) -> Templates:
        data = _mapping(value)
        md = _mapping(data.get("md"))
        dot = _mapping(data.get("dot"))
        puml = _mapping(data.get("puml"))
        mermaid = _mapping(data.get("mermaid"))
        return cls(
            md=MDTemplates(
                index=_text(md.get("index")),
                table=_text(md.get("table")),
                viewpoint=_text(md.get("viewpoint")),
            ),
            dot=DotTemplates(schema=_text(dot.get("schema")), table=_text(dot.get("table"))),
            puml=PUMLTemplates(schema=_text(puml.get("schema")), table=_text(puml.get("table"))),
            mermaid=MermaidTemplates(
                schema=_text(mermaid.get("schema")), table=_text(mermaid.get("table"))
            ),
        )


@dataclass
class ViewpointGroup:
    """A named group of tables inside a viewpoint."""

    name: str = ""
    desc: str = ""
    labels: list[str] = field(default_factory=list)
    tables: list[str] = field(default_factory=list)
    color: str = ""

    @classmethod
    def _from_yaml(cls, value: Any) -> ViewpointGroup:
        data = _mapping(value)
        return cls(
            name=_text(data.get("name")),
            desc=_text(data.get("desc")),
            labels=_strings(data.get("labels")),
            tables=_strings(data.get("tables")),
            color=_text(data.get("color")),
        )


@dataclass
class Viewpoint:
    """A named view on part of the schema."""

    name: str = ""
    desc: str = ""
    labels: list[str] = field(default_factory=list)
    tables: list[str] = field(default_factory=list)
    groups: list[ViewpointGroup] = field(default_factory=list)
    distance: int = 0

    @classmethod
    def _from_yaml(cls, value: Any) -> Viewpoint:
        data = _mapping(value)
        return cls(
            name=_text(data.get("name")),
            desc=_text(data.get("desc")),
            labels=_strings(data.get("labels")),
            tables=_strings(data.get("tables")),
            groups=[ViewpointGroup._from_yaml(item) for item in _items(data.get("groups"))],
            distance=int(data.get("distance") or 0),
        )


Option = Callable[["Config"], None]

_ENV_RE = re.compile(r"\$\{([^}]*)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def expand_env(text: str) -> str:
    """Replace ``$NAME`` and ``${NAME}`` with environment values; unset names become empty."""
    return _ENV_RE.sub(
        lambda m: os.environ.get(m.group(1) if m.group(1) is not None else m.group(2), ""), text
    )


_CONSTRAINT_RE = re.compile(r"(~>|>=|<=|!=|==|=|>|<|~|\^)?\s*v?(\d[^\s,|]*)")


def _parse_version(text: str) -> Version:
    try:
        return Version(text.strip().lstrip("v"))
    except InvalidVersion as exc:
        raise ConfigError(f"invalid version: {text}") from exc


def _release(version: Version) -> tuple[int, int, int]:
    padded = (*version.release, 0, 0, 0)
    return padded[0], padded[1], padded[2]


def _satisfies(operator: str, raw: str, version: Version) -> bool:
    target = _parse_version(raw)
    specified = len(re.split(r"[-+]", raw, maxsplit=1)[0].split("."))
    major, minor, patch = _release(target)
    if operator in ("", "=", "=="):
        return version == target
    if operator == "!=":
        return version != target
    if operator == ">":
        return version > target
    if operator == "<":
        return version < target
    if operator == ">=":
        return version >= target
    if operator == "<=":
        return version <= target
    if operator == "~>":
        upper = (major + 1, 0, 0) if specified <= 2 else (major, minor + 1, 0)
    elif operator == "~":
        upper = (major + 1, 0, 0) if specified == 1 else (major, minor + 1, 0)
    elif major > 0 or specified == 1:
        upper = (major + 1, 0, 0)
    elif minor > 0 or specified == 2:
        upper = (0, minor + 1, 0)
    else:
        upper = (0, 0, patch + 1)
    return target <= version < Version(".".join(str(part) for part in upper))


def _check_constraints(constraints: str, version: Version) -> bool:
    for alternative in constraints.split("||"):
        found = list(_CONSTRAINT_RE.finditer(alternative))
        leftover = _CONSTRAINT_RE.sub("", alternative).replace(",", "").strip()
        if not found or leftover:
            raise ConfigError(f"invalid version constraint: {constraints}")
        if all(_satisfies(m.group(1) or "", m.group(2), version) for m in found):
            return True
    return False


@dataclass
class Config:
    """Settings that steer how a schema is documented."""

    name: str = ""
    desc: str = ""
    labels: list[str] = field(default_factory=list)
    dsn: DSN = field(default_factory=DSN)
    doc_path: str = ""
    format: Format = field(default_factory=Format)
    er: ER = field(default_factory=ER)
    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    distance: int = 0
    lint: Lint = field(default_factory=Lint)
    lint_exclude: list[str] = field(default_factory=list)
    viewpoints: list[Viewpoint] = field(default_factory=list)
    relations: list[AdditionalRelation] = field(default_factory=list)
    comments: list[AdditionalComment] = field(default_factory=list)
    dictionary: dict[str, str] = field(default_factory=dict)
    templates: Templates = field(default_factory=Templates)
    detect_virtual_relations: DetectVirtualRelations = field(
        default_factory=DetectVirtualRelations
    )
    base_url: str = ""
    required_version: str = ""
    disable_output_schema: bool = False
    merged_dictionary: dict[str, str] = field(default_factory=dict)
    include_labels: list[str] = field(default_factory=list)
    path: str = ""
    root: str = ""

    def __post_init__(self) -> None:
        self._set_default()

    def _set_default(self) -> None:
        if self.doc_path == "":
            self.doc_path = DEFAULT_DOC_PATH
        if self.er.format == "":
            self.er.format = DEFAULT_ER_FORMAT
        if self.er.distance is None:
            self.er.distance = DEFAULT_ER_DISTANCE

    def load(self, config_path: str | os.PathLike | None, *options: Option) -> None:
        """Load the config file, the environment and ``options``, then validate."""
        self.load_config_file(config_path)
        self.load_environ()
        self.load_option(*options)
        self._set_default()
        self.validate()

    def load_option(self, *options: Option) -> None:
        for option in options:
            option(self)

    def load_environ(self) -> None:
        """Apply ``TBLS_DSN`` and ``TBLS_DOC_PATH`` when they are set."""
        dsn = os.environ.get("TBLS_DSN", "")
        if dsn:
            self.dsn.url = dsn
        doc_path = os.environ.get("TBLS_DOC_PATH", "")
        if doc_path:
            self.doc_path = doc_path

    def load_config_file(self, path: str | os.PathLike | None) -> None:
        """Load ``path``, or a default config file when no path and no DSN are given."""
        path = os.fspath(path) if path else ""
        if path == "" and os.environ.get("TBLS_DSN", "") == "":
            first = ""
            for candidate in DEFAULT_CONFIG_FILE_PATHS:
                full = os.path.join(self.root, candidate)
                if os.path.isfile(full):
                    if first:
                        raise ConfigError(f"duplicate config file [{first}, {candidate}]")
                    first = candidate
                    path = full
        if path == "":
            return
        full_path = os.path.normpath(os.path.abspath(path))
        try:
            with open(full_path, "rb") as handle:
                data = handle.read()
        except OSError as exc:
            raise ConfigError(f"failed to load config file: {exc}") from exc
        self.path = full_path
        self.load_config(data)

    def load_config(self, data: bytes | str) -> None:
        """Load settings from YAML text, expanding environment variables first."""
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        try:
            loaded = yaml.safe_load(expand_env(text))
            self._apply(loaded if loaded is not None else {})
        except (yaml.YAMLError, TypeError, ValueError, AttributeError) as exc:
            raise ConfigError(f"failed to load config file: {exc}") from exc
        self.merged_dictionary.update(self.dictionary)

    def _apply(self, data: Any) -> None:
        data = _mapping(data)
        for key, attribute in (
            ("name", "name"),
            ("desc", "desc"),
            ("docPath", "doc_path"),
            ("baseUrl", "base_url"),
            ("requiredVersion", "required_version"),
        ):
            if key in data:
                setattr(self, attribute, _text(data[key]))
        for key, attribute in (
            ("labels", "labels"),
            ("include", "include"),
            ("exclude", "exclude"),
            ("lintExclude", "lint_exclude"),
        ):
            if key in data:
                setattr(self, attribute, _strings(data[key]))
        if "distance" in data:
            self.distance = int(data["distance"] or 0)
        if "disableOutputSchema" in data:
            self.disable_output_schema = bool(data["disableOutputSchema"])
        if "dsn" in data:
            self.dsn = DSN._from_yaml(data["dsn"])
        if "format" in data:
            self.format = Format._from_yaml(data["format"])
        if "er" in data:
            self.er._update(data["er"])
        if "lint" in data:
            self.lint = Lint.from_dict(_mapping(data["lint"]))
        if "viewpoints" in data:
            self.viewpoints = [Viewpoint._from_yaml(item) for item in _items(data["viewpoints"])]
        if "relations" in data:
            self.relations = [
                AdditionalRelation._from_yaml(item) for item in _items(data["relations"])
            ]
        if "comments" in data:
            self.comments = [
                AdditionalComment._from_yaml(item) for item in _items(data["comments"])
            ]
        if "dict" in data:
            self.dictionary = _str_map(data["dict"])
        if "templates" in data:
            self.templates = Templates._from_yaml(data["templates"])
        if "detectVirtualRelations" in data:
            self.detect_virtual_relations = DetectVirtualRelations._from_yaml(
                data["detectVirtualRelations"]
            )

    def check_version(self, version: str) -> None:
        """Raise ConfigError unless ``version`` meets the required version."""
        if version == "dev" or self.required_version == "":
            return
        if not _check_constraints(self.required_version, _parse_version(version)):
            raise ConfigError(
                f"the required tbls version for the configuration is '{self.required_version}'. "
                f"however, the running tbls version is '{version}'"
            )

    def validate(self) -> None:
        self.check_version(VERSION)
        if self.er.format not in SUPPORT_ER_FORMAT:
            raise ConfigError(f"unsupported ER format: {self.er.format}")
        for i, viewpoint in enumerate(self.viewpoints):
            if viewpoint.name == "":
                raise ConfigError(f"viewpoints[{i}] name is required")
            if viewpoint.desc == "":
                raise ConfigError(f"viewpoints[{i}] description is required")
            for j, group in enumerate(viewpoint.groups):
                if group.name == "":
                    raise ConfigError(f"viewpoints[{i}].groups[{j}] name is required")
                if group.desc == "":
                    raise ConfigError(f"viewpoints[{i}].groups[{j}] description is required")

    def masked_dsn(self) -> str:
        """Return the DSN URL with its password replaced by asterisks."""
        url = self.dsn.url
        try:
            parts = urlsplit(url)
        except ValueError as exc:
            raise ConfigError(f"invalid DSN: {exc}") from exc
        userinfo, at, host = parts.netloc.rpartition("@")
        if not at:
            return url
        user, colon, _ = userinfo.partition(":")
        if not colon:
            return url
        return parts._replace(netloc=f"{user}:{_MASK}@{host}").geturl()

    def schema_file_path(self) -> str:
        return os.path.join(self.doc_path, SCHEMA_FILE_NAME)

    def need_to_generate_er_images(self) -> bool:
        return not self.er.skip and self.er.format != "mermaid"

    def merge_additional_data(self, schema: Schema) -> None:
        merge_additional_relations(schema, self.relations)
        merge_additional_comments(schema, self.comments)

    def detect_show_columns_for_er(self, schema: Schema) -> None:
        """Mark the columns and relations an ER diagram should hide."""
        types = self.er.show_column_types
        if types is None:
            return
        if not types.related and not types.primary:
            raise ConfigError("er.showColumnTypes: must be true at least one")
        for table in schema.tables:
            for column in table.columns:
                if types.related and (column.child_relations or column.parent_relations):
                    column.hide_for_er = False
                elif types.primary and column.pk:
                    column.hide_for_er = False
                else:
                    column.hide_for_er = True
                    for relation in [*column.child_relations, *column.parent_relations]:
                        relation.hide_for_er = True


def dsn_url(dsn: str) -> Option:
    def apply(config: Config) -> None:
        config.dsn.url = dsn

    return apply


def doc_path(path: str) -> Option:
    def apply(config: Config) -> None:
        config.doc_path = path

    return apply


def adjust(value: bool) -> Option:
    def apply(config: Config) -> None:
        if value:
            config.format.adjust = True

    return apply


def sort(value: bool) -> Option:
    def apply(config: Config) -> None:
        if value:
            config.format.sort = True

    return apply


def er_skip(value: bool) -> Option:
    def apply(config: Config) -> None:
        config.er.skip = value

    return apply


def er_format(value: str) -> Option:
    def apply(config: Config) -> None:
        if value:
            config.er.format = value

    return apply


def distance(value: int) -> Option:
    def apply(config: Config) -> None:
        config.distance = value

    return apply


def base_url(value: str) -> Option:
    def apply(config: Config) -> None:
        if value:
            config.base_url = value

    return apply


def include(names: Iterable[str]) -> Option:
    names = list(names)

    def apply(config: Config) -> None:
        if names:
            config.include = list(names)

    return apply


def exclude(names: Iterable[str]) -> Option:
    names = list(names)

    def apply(config: Config) -> None:
        if names:
            config.exclude = list(names)

    return apply


def include_labels(labels: Iterable[str]) -> Option:
    labels = list(labels)

    def apply(config: Config) -> None:
        if labels:
            config.include_labels = list(labels)

    return apply


def merge_additional_relations(schema: Schema, relations: Iterable[AdditionalRelation]) -> None:
    """Add the configured relations to ``schema``, or override matching ones."""
    for additional in relations:
        relation = Relation(
            virtual=True, definition=additional.definition or "Additional Relation"
        )
        try:
            relation.table = schema.find_table_by_name(additional.table)
            for name in additional.columns:
                column = relation.table.find_column_by_name(name)
                relation.columns.append(column)
                column.parent_relations.append(relation)
            relation.parent_table = schema.find_table_by_name(additional.parent_table)
            for name in additional.parent_columns:
                column = relation.parent_table.find_column_by_name(name)
                relation.parent_columns.append(column)
                column.child_relations.append(relation)
        except NotFoundError as exc:
            raise ConfigError(f"failed to add relation: {exc}") from exc

        if not additional.override:
            schema.relations.append(relation)
            continue
        try:
            existing = schema.find_relation(relation.columns, relation.parent_columns)
        except NotFoundError:
            schema.relations.append(relation)
            continue
        existing.virtual = True
        existing.definition = additional.definition
        try:
            existing.cardinality = to_cardinality(additional.cardinality)
            existing.parent_cardinality = to_cardinality(additional.parent_cardinality)
        except ValueError as exc:
            raise ConfigError(f"failed to add relation: {exc}") from exc


def merge_additional_comments(schema: Schema, comments: Iterable[AdditionalComment]) -> None:
    """Apply the configured comments and labels to ``schema``."""
    for comment in comments:
        try:
            table = schema.find_table_by_name(comment.table)
        except NotFoundError as exc:
            raise ConfigError(f"failed to add table comment: {exc}") from exc
        if comment.table_comment:
            table.comment = comment.table_comment
        for label in comment.labels:
            table.labels = table.labels.merge(label)
        try:
            for name, text in comment.column_comments.items():
                table.find_column_by_name(name).comment = text
            for name, labels in comment.column_labels.items():
                column = table.find_column_by_name(name)
                for label in labels:
                    column.labels = column.labels.merge(label)
        except NotFoundError as exc:
            raise ConfigError(f"failed to add column comment: {exc}") from exc
        for finder, items, kind in (
            (table.find_index_by_name, comment.index_comments, "index"),
            (table.find_constraint_by_name, comment.constraint_comments, "constraint"),
            (table.find_trigger_by_name, comment.trigger_comments, "trigger"),
        ):
            for name, text in items.items():
                try:
                    finder(name).comment = text
                except NotFoundError as exc:
                    raise ConfigError(f"failed to add {kind} comment: {exc}") from exc


def merge_detected_relations(schema: Schema, strategy: NamingStrategy) -> None:
    """Add virtual relations guessed from column names by ``strategy``."""
    for table in schema.tables:
        for column in table.columns:
            try:
                parent_table = schema.find_table_by_name(strategy.parent_table_name(column.name))
            except NotFoundError:
                continue
            if parent_table is table:
                continue
            try:
                parent_column = parent_table.find_column_by_name(
                    strategy.parent_column_name(column.name)
                )
            except NotFoundError:
                continue
            try:
                schema.find_relation([column], [parent_column])
                continue
            except NotFoundError:
                pass
            relation = Relation(
                table=table,
                columns=[column],
                parent_table=parent_table,
                parent_columns=[parent_column],
                definition="Detected Relation",
                virtual=True,
            )
            column.parent_relations.append(relation)
            parent_column.child_relations.append(relation)
            schema.relations.append(relation)


def detect_cardinality(schema: Schema) -> None:
    """Fill in unknown cardinalities from constraints and nullability."""
    for relation in schema.relations:
        if relation.cardinality == Cardinality.UNKNOWN:
            names = [column.name for column in relation.columns]
            unique = False
            for constraint in relation.table.constraints:
                if len(names) != len(constraint.columns):
                    continue
                if not all(name in names for name in constraint.columns):
                    continue
                definition = constraint.definition.upper()
                if "UNIQUE" in definition or "PRIMARY KEY" in definition:
                    unique = True
            relation.cardinality = Cardinality.ZERO_OR_ONE if unique else Cardinality.ZERO_OR_MORE
        if relation.parent_cardinality == Cardinality.UNKNOWN:
            nullable = all(column.nullable for column in relation.columns)
            relation.parent_cardinality = (
                Cardinality.ZERO_OR_ONE if nullable else Cardinality.EXACTLY_ONE
            )


def detect_pk_fk(schema: Schema) -> None:
    """Mark primary key columns from indexes and foreign key columns from relations."""
    for table in schema.tables:
        for index in table.indexes:
            if "PRIMARY" not in index.definition:
                continue
            for name in index.columns:
                table.find_column_by_name(name).pk = True
        for column in table.columns:
            if column.parent_relations and not column.pk:
                column.fk = True