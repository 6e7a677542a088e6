"""gagara-boost SDK Type Definitions."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Literal, Protocol, TypedDict, Union


# Scalar types
ErrorCode = Literal[
    "UNAUTHORIZED",
    "NOT_FOUND",
    "INVALID_REQUEST",
    "SERVER_ERROR",
    "HTTP_ERROR",
    "VALIDATION_ERROR",
    "NETWORK_ERROR",
    "TIMEOUT",
    "PARSE_ERROR",
    "UNKNOWN_ERROR",
]
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
QueryValue = Union[str, int, float, bool, None]


# Transport boundary
class ResponseLike(Protocol):
    """What the request pipeline reads from a transport response."""

    @property
    def status_code(self) -> int: ...

    @property
    def text(self) -> str: ...

    @property
    def content(self) -> bytes: ...


class TransportRequest(TypedDict):
    method: str
    headers: dict[str, str]
    body: Any
    signal: Any


Transport = Callable[[str, TransportRequest], Awaitable[Any]]


# Client configuration
class GagaraBoostConfig(TypedDict, total=False):
    # Support both naming conventions
    base_url: str
    baseUrl: str
    token: str
    service_token: str
    serviceToken: str
    transport: Transport
    timeout_ms: int
    timeout: int


class UploadDatasetOptions(TypedDict, total=False):
    workspace_id: str
    workspaceId: str
    alias: str
    filename: str
    content_type: str
    contentType: str


# Users
class UserCreateResponse(TypedDict):
    id: str
    token: str


# Workspaces
class Workspace(TypedDict):
    id: str
    owner_user_id: str
    name: str
    is_default: bool
    created_at: str


class WorkspaceCreate(TypedDict):
    name: str


class StatusResponse(TypedDict):
    status: str


# Datasets
class DatasetItem(TypedDict, total=False):
    id: str
    alias: str | None
    workspace_id: str
    created_at: str
    modified_at: str | None
    file_size_bytes: int | None


class UploadResponse(TypedDict):
    dataset_id: str
    created_at: str


class DatasetColumn(TypedDict):
    name: str
    data_type: str
    nullable: bool


class DatasetSchemaResponse(TypedDict):
    columns: list[DatasetColumn]


class DatasetColumnInfo(TypedDict, total=False):
    name: str
    size_bytes: int
    count_distinct: int
    distinct_values: list[str | int] | None
    numeric_values_stats: dict[str, float | None] | None


class DatasetMetaResponse(TypedDict):
    row_count: int
    file_size_bytes: int
    columns_info: list[DatasetColumnInfo]


class DatasetColumnUserInput(TypedDict, total=False):
    value_filter_predicate: str | dict[str, Any] | None
    display_formatter: str | None
    is_categorical: bool


class DatasetColumnStatistics(TypedDict, total=False):
    size_bytes: int
    count_distinct: int
    distinct_values: list[str | int] | None
    numeric_values_stats: dict[str, float | None] | None


class DatasetColumnCreate(TypedDict):
    name: str
    userInput: DatasetColumnUserInput
    statistics: DatasetColumnStatistics


class DatasetColumnUpdate(TypedDict, total=False):
    name: str | None
    userInput: DatasetColumnUserInput | None
    statistics: DatasetColumnStatistics | None


class StoredDatasetColumn(DatasetColumnCreate):
    id: str
    dataset_id: str
    created_at: str


# Row sets
class RowSetCreate(TypedDict, total=False):
    name: str
    workspace_id: str
    base_dataset_id: str
    predicate: dict[str, Any] | None


class RowSet(RowSetCreate, total=False):
    id: str
    created_at: str


class RowSetUpdate(TypedDict, total=False):
    name: str | None
    predicate: dict[str, Any] | None


class RowSetSampleResponse(TypedDict):
    row: dict[str, Any] | None
    columns: list[str]


# Column sets
class FeatureColumnDetail(TypedDict):
    field: str
    is_categorical: bool


class ColumnSetCreate(TypedDict):
    dataset_id: str
    name: str
    column_to_predict: str
    feature_columns: list[str | FeatureColumnDetail]


class ColumnSet(ColumnSetCreate):
    id: str
    created_at: str


class ColumnSetUpdate(TypedDict, total=False):
    name: str | None
    column_to_predict: str | None
    feature_columns: list[str | FeatureColumnDetail] | None


# Training param sets
class TrainingParamSetCreate(TypedDict, total=False):
    workspace_id: str
    name: str
    params: dict[str, Any]
    meta: dict[str, Any] | None


class TrainingParamSet(TrainingParamSetCreate, total=False):
    id: str
    created_at: str


class TrainingParamSetUpdate(TypedDict, total=False):
    name: str | None
    params: dict[str, Any] | None
    meta: dict[str, Any] | None


# Models
class ModelDetail(TypedDict, total=False):
    id: str
    workspace_id: str | None
    name: str | None
    created_at: str
    metrics: dict[str, Any] | None
    row_set_id: str | None
    column_set_id: str | None
    training_param_set_id: str | None
    training_seconds: float | None


# Actions
class TrainingRequest(TypedDict, total=False):
    workspace_id: str
    row_set_id: str
    column_set_id: str
    training_param_set_id: str
    time_budget_seconds: int


class TrainingResponse(TypedDict):
    status: str
    id: str
    metrics: dict[str, Any]


class OptimalParamSearchRequest(TypedDict, total=False):
    row_set_id: str
    column_set_id: str
    objective: str
    metric: str
    time_budget_seconds: int
    validation_fraction: float


class OptimalParamSearchResponse(TypedDict, total=False):
    status: str
    metric_used: str
    surrogate_metric: str | None
    trials_run: int
    best_params: dict[str, Any]
    best_score: float | None
    best_iteration: int | None
    best_score_breakdown: dict[str, Any] | None
    note: str | None
    elapsed_seconds: float | None


class PredictionRequest(TypedDict):
    features: list[dict[str, Any]]


class PredictionResponse(TypedDict):
    predictions: list[float]


class PredictionWithFreeParameterRequest(TypedDict, total=False):
    base_features: dict[str, Any]
    free_parameter_columns: list[str] | None
    free_parameter_column: str | None


class FreeParameterPrediction(TypedDict):
    values: dict[str, Any]
    prediction: float


class PredictionWithFreeParameterResponse(TypedDict):
    predictions: list[FreeParameterPrediction]


class ErrorResponse(TypedDict, total=False):
    detail: str
    error: str
