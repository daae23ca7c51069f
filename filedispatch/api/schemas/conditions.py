"""Modèle des conditions: arbre de prédicats à variantes étiquetées.

Toutes les variantes sont fermées (unions discriminées sur ``type``), de sorte
qu'un type inconnu échoue à la construction et jamais à l'évaluation.
"""
import datetime as dt
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field, model_validator

from filedispatch.api.schemas.base import CamelModel

MAX_CONDITION_DEPTH = 64


class MatchType(str, Enum):
    ALL = "all"
    ANY = "any"
    NONE = "none"


class StringOperator(str, Enum):
    IS = "is"
    IS_NOT = "isNot"
    CONTAINS = "contains"
    DOES_NOT_CONTAIN = "doesNotContain"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    MATCHES = "matches"
    DOES_NOT_MATCH = "doesNotMatch"


class SizeUnit(str, Enum):
    BYTES = "bytes"
    KILOBYTES = "kilobytes"
    MEGABYTES = "megabytes"
    GIGABYTES = "gigabytes"


class TimeUnit(str, Enum):
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"


class FileKind(str, Enum):
    FILE = "file"
    FOLDER = "folder"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    ARCHIVE = "archive"
    CODE = "code"
    OTHER = "other"


# === Opérateurs de comparaison (taille) ===

class EqualsComparison(CamelModel):
    type: Literal["equals"] = "equals"


class NotEqualsComparison(CamelModel):
    type: Literal["notEquals"] = "notEquals"


class GreaterThanComparison(CamelModel):
    type: Literal["greaterThan"] = "greaterThan"


class LessThanComparison(CamelModel):
    type: Literal["lessThan"] = "lessThan"


class GreaterOrEqualComparison(CamelModel):
    type: Literal["greaterOrEqual"] = "greaterOrEqual"


class LessOrEqualComparison(CamelModel):
    type: Literal["lessOrEqual"] = "lessOrEqual"


class BetweenComparison(CamelModel):
    type: Literal["between"] = "between"
    min: int = Field(ge=0)
    max: int = Field(ge=0)


ComparisonOperator = Annotated[
    Union[
        EqualsComparison,
        NotEqualsComparison,
        GreaterThanComparison,
        LessThanComparison,
        GreaterOrEqualComparison,
        LessOrEqualComparison,
        BetweenComparison,
    ],
    Field(discriminator="type"),
]


# === Opérateurs de date ===

class DateIs(CamelModel):
    type: Literal["is"] = "is"
    date: dt.date


class DateIsBefore(CamelModel):
    type: Literal["isBefore"] = "isBefore"
    date: dt.date


class DateIsAfter(CamelModel):
    type: Literal["isAfter"] = "isAfter"
    date: dt.date


class DateInTheLast(CamelModel):
    type: Literal["inTheLast"] = "inTheLast"
    amount: int = Field(ge=0)
    unit: TimeUnit


class DateNotInTheLast(CamelModel):
    type: Literal["notInTheLast"] = "notInTheLast"
    amount: int = Field(ge=0)
    unit: TimeUnit


class DateBetween(CamelModel):
    type: Literal["between"] = "between"
    start: dt.date
    end: dt.date


DateOperator = Annotated[
    Union[DateIs, DateIsBefore, DateIsAfter, DateInTheLast, DateNotInTheLast, DateBetween],
    Field(discriminator="type"),
]


# === Opérateurs d'heure (heure du jour uniquement) ===

class TimeIs(CamelModel):
    type: Literal["is"] = "is"
    time: dt.time


class TimeIsBefore(CamelModel):
    type: Literal["isBefore"] = "isBefore"
    time: dt.time


class TimeIsAfter(CamelModel):
    type: Literal["isAfter"] = "isAfter"
    time: dt.time


class TimeBetween(CamelModel):
    type: Literal["between"] = "between"
    start: dt.time
    end: dt.time


TimeOperator = Annotated[
    Union[TimeIs, TimeIsBefore, TimeIsAfter, TimeBetween],
    Field(discriminator="type"),
]


# === Conditions ===

class StringConditionFields(CamelModel):
    operator: StringOperator
    value: str = ""
    case_sensitive: bool = True


class NameCondition(StringConditionFields):
    type: Literal["name"] = "name"


class ExtensionCondition(StringConditionFields):
    type: Literal["extension"] = "extension"


class FullNameCondition(StringConditionFields):
    type: Literal["fullName"] = "fullName"


class ContentsCondition(StringConditionFields):
    type: Literal["contents"] = "contents"


class SizeCondition(CamelModel):
    type: Literal["size"] = "size"
    operator: ComparisonOperator
    value: Optional[int] = Field(default=None, ge=0)
    unit: SizeUnit = SizeUnit.BYTES


class DateCreatedCondition(CamelModel):
    type: Literal["dateCreated"] = "dateCreated"
    operator: DateOperator


class DateModifiedCondition(CamelModel):
    type: Literal["dateModified"] = "dateModified"
    operator: DateOperator


class DateAddedCondition(CamelModel):
    type: Literal["dateAdded"] = "dateAdded"
    operator: DateOperator


class DateLastMatchedCondition(CamelModel):
    type: Literal["dateLastMatched"] = "dateLastMatched"
    operator: DateOperator


class CurrentTimeCondition(CamelModel):
    type: Literal["currentTime"] = "currentTime"
    operator: TimeOperator


class KindCondition(CamelModel):
    type: Literal["kind"] = "kind"
    kind: FileKind
    negate: bool = False


class ShellScriptCondition(CamelModel):
    type: Literal["shellScript"] = "shellScript"
    command: str


class NestedCondition(CamelModel):
    type: Literal["nested"] = "nested"
    match_type: MatchType = MatchType.ALL
    conditions: List["Condition"] = Field(default_factory=list)
    label: Optional[str] = None

    @model_validator(mode="after")
    def check_depth(self):
        # Le groupe racine compte pour un niveau
        if group_depth(self) + 1 > MAX_CONDITION_DEPTH:
            raise ValueError(f"Condition groups cannot be nested deeper than {MAX_CONDITION_DEPTH} levels")
        return self


Condition = Annotated[
    Union[
        NameCondition,
        ExtensionCondition,
        FullNameCondition,
        ContentsCondition,
        SizeCondition,
        DateCreatedCondition,
        DateModifiedCondition,
        DateAddedCondition,
        DateLastMatchedCondition,
        CurrentTimeCondition,
        KindCondition,
        ShellScriptCondition,
        NestedCondition,
    ],
    Field(discriminator="type"),
]

StringCondition = Union[NameCondition, ExtensionCondition, FullNameCondition, ContentsCondition]
DateCondition = Union[DateCreatedCondition, DateModifiedCondition, DateAddedCondition, DateLastMatchedCondition]

NestedCondition.model_rebuild()


class ConditionGroup(CamelModel):
    match_type: MatchType = MatchType.ALL
    conditions: List[Condition] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_depth(self):
        if group_depth(self) > MAX_CONDITION_DEPTH:
            raise ValueError(f"Condition groups cannot be nested deeper than {MAX_CONDITION_DEPTH} levels")
        return self


def group_depth(group: Union[ConditionGroup, NestedCondition]) -> int:
    """Profondeur d'un groupe: 1 pour un groupe sans sous-groupe"""
    depth = 1
    stack = [(group, 1)]
    while stack:
        current, level = stack.pop()
        depth = max(depth, level)
        for condition in current.conditions:
            if isinstance(condition, NestedCondition):
                stack.append((condition, level + 1))
    return depth
