"""gagara-boost SDK Client."""

from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Any

from gagara_boost.config import config_from_env, resolve_config
from gagara_boost.dotdict import DotDict, wrap_json
from gagara_boost.http_client import create_http_client, is_success
from gagara_boost.multipart import UploadFileInput, encode_multipart
from gagara_boost.transport import create_httpx_transport
from gagara_boost.types import (
    ColumnSetCreate,
    ColumnSetUpdate,
    DatasetColumnCreate,
    DatasetColumnUpdate,
    GagaraBoostConfig,
    OptimalParamSearchRequest,
    PredictionRequest,
    PredictionWithFreeParameterRequest,
    RowSetCreate,
    RowSetUpdate,
    TrainingParamSetCreate,
    TrainingParamSetUpdate,
    TrainingRequest,
    UploadDatasetOptions,
    WorkspaceCreate,
)

logger = logging.getLogger(__name__)


def _create_users_manager(http: dict[str, Any]) -> SimpleNamespace:
    """Create a users manager with create/create_and_set_token methods."""

    async def create() -> DotDict:
        return wrap_json(await http["request_json"]("/users", method="POST"))

    async def create_and_set_token() -> DotDict:
        user = await create()
        http["set_token"](user["token"])
        return user

    return SimpleNamespace(create=create, create_and_set_token=create_and_set_token)


def _create_workspaces_manager(http: dict[str, Any]) -> SimpleNamespace:
    """Create a workspaces manager with list/create/get/rename/delete methods."""

    async def list_fn() -> list[DotDict]:
        return wrap_json(await http["request_json"]("/workspaces"))

    async def create(data: WorkspaceCreate | str) -> DotDict:
        payload = {"name": data} if isinstance(data, str) else data
        return wrap_json(await http["request_json"]("/workspaces", method="POST", body=payload))

    async def get(workspace_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/workspaces/{workspace_id}"))

    async def rename(workspace_id: str, name: str) -> DotDict:
        return wrap_json(
            await http["request_json"](f"/workspaces/{workspace_id}", method="PATCH", body={"name": name})
        )

    async def delete(workspace_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/workspaces/{workspace_id}", method="DELETE"))

    return SimpleNamespace(list=list_fn, create=create, get=get, rename=rename, delete=delete)


def _create_datasets_manager(http: dict[str, Any]) -> SimpleNamespace:
    """Create a datasets manager: CRUD, upload/download, meta, schema and columns."""

    async def list_fn(workspace_id: str | None = None) -> list[DotDict]:
        return wrap_json(await http["request_json"]("/datasets", params={"workspace_id": workspace_id}))

    async def get(dataset_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/datasets/{dataset_id}"))

    async def upload(file: UploadFileInput, options: UploadDatasetOptions | None = None) -> DotDict:
        body = encode_multipart(file, options)
        return wrap_json(await http["request_json"]("/datasets", method="POST", body=body))

    async def download(dataset_id: str) -> bytes:
        return await http["request_bytes"](f"/datasets/{dataset_id}/download")

    async def delete(dataset_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/datasets/{dataset_id}", method="DELETE"))

    async def update_alias(dataset_id: str, alias: str) -> DotDict:
        return wrap_json(
            await http["request_json"](f"/datasets/{dataset_id}", method="PATCH", body={"alias": alias})
        )

    async def get_meta(dataset_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/datasets/{dataset_id}/meta"))

    async def refresh_meta(dataset_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/datasets/{dataset_id}/refresh", method="POST"))

    async def get_schema(dataset_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/datasets/{dataset_id}/schema"))

    async def list_columns(dataset_id: str) -> list[DotDict]:
        return wrap_json(await http["request_json"](f"/datasets/{dataset_id}/columns"))

    async def create_column(dataset_id: str, payload: DatasetColumnCreate) -> DotDict:
        return wrap_json(
            await http["request_json"](f"/datasets/{dataset_id}/columns", method="POST", body=payload)
        )

    async def update_column(dataset_id: str, column_id: str, payload: DatasetColumnUpdate) -> DotDict:
        return wrap_json(
            await http["request_json"](
                f"/datasets/{dataset_id}/columns/{column_id}", method="PATCH", body=payload
            )
        )

    return SimpleNamespace(
        list=list_fn,
        get=get,
        upload=upload,
        download=download,
        delete=delete,
        update_alias=update_alias,
        get_meta=get_meta,
        refresh_meta=refresh_meta,
        get_schema=get_schema,
        list_columns=list_columns,
        create_column=create_column,
        update_column=update_column,
    )


def _create_row_sets_manager(http: dict[str, Any]) -> SimpleNamespace:
    """Create a row sets manager."""

    async def list_fn(workspace_id: str | None = None) -> list[DotDict]:
        return wrap_json(await http["request_json"]("/row-sets", params={"workspace_id": workspace_id}))

    async def get(row_set_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/row-sets/{row_set_id}"))

    async def create(payload: RowSetCreate) -> DotDict:
        return wrap_json(await http["request_json"]("/row-sets", method="POST", body=payload))

    async def update(row_set_id: str, payload: RowSetUpdate) -> DotDict:
        return wrap_json(await http["request_json"](f"/row-sets/{row_set_id}", method="PATCH", body=payload))

    async def delete(row_set_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/row-sets/{row_set_id}", method="DELETE"))

    async def get_schema(row_set_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/row-sets/{row_set_id}/schema"))

    async def get_meta(row_set_id: str, force: bool = False) -> DotDict:
        # force is only sent when set
        params = {"force": "true" if force else None}
        return wrap_json(await http["request_json"](f"/row-sets/{row_set_id}/meta", params=params))

    async def get_sample(row_set_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/row-sets/{row_set_id}/sample"))

    return SimpleNamespace(
        list=list_fn,
        get=get,
        create=create,
        update=update,
        delete=delete,
        get_schema=get_schema,
        get_meta=get_meta,
        get_sample=get_sample,
    )


def _create_column_sets_manager(http: dict[str, Any]) -> SimpleNamespace:
    """Create a column sets manager."""

    async def list_fn(workspace_id: str | None = None, dataset_id: str | None = None) -> list[DotDict]:
        params = {"workspace_id": workspace_id, "dataset_id": dataset_id}
        return wrap_json(await http["request_json"]("/column-sets", params=params))

    async def get(column_set_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/column-sets/{column_set_id}"))

    async def create(payload: ColumnSetCreate) -> DotDict:
        return wrap_json(await http["request_json"]("/column-sets", method="POST", body=payload))

    async def clone(column_set_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/column-sets/{column_set_id}/clone", method="POST"))

    async def update(column_set_id: str, payload: ColumnSetUpdate) -> DotDict:
        return wrap_json(
            await http["request_json"](f"/column-sets/{column_set_id}", method="PATCH", body=payload)
        )

    async def delete(column_set_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/column-sets/{column_set_id}", method="DELETE"))

    return SimpleNamespace(
        list=list_fn,
        get=get,
        create=create,
        clone=clone,
        update=update,
        delete=delete,
    )


def _create_training_param_sets_manager(http: dict[str, Any]) -> SimpleNamespace:
    """Create a training param sets manager."""

    async def list_fn(workspace_id: str | None = None) -> list[DotDict]:
        return wrap_json(
            await http["request_json"]("/training-param-sets", params={"workspace_id": workspace_id})
        )

    async def get(param_set_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/training-param-sets/{param_set_id}"))

    async def create(payload: TrainingParamSetCreate) -> DotDict:
        return wrap_json(await http["request_json"]("/training-param-sets", method="POST", body=payload))

    async def update(param_set_id: str, payload: TrainingParamSetUpdate) -> DotDict:
        return wrap_json(
            await http["request_json"](f"/training-param-sets/{param_set_id}", method="PATCH", body=payload)
        )

    async def delete(param_set_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/training-param-sets/{param_set_id}", method="DELETE"))

    return SimpleNamespace(list=list_fn, get=get, create=create, update=update, delete=delete)


def _create_models_manager(http: dict[str, Any]) -> SimpleNamespace:
    """Create a models manager with list/get/delete/rename methods."""

    async def list_fn(workspace_id: str | None = None, dataset_id: str | None = None) -> list[DotDict]:
        params = {"workspace_id": workspace_id, "dataset_id": dataset_id}
        return wrap_json(await http["request_json"]("/models", params=params))

    async def get(model_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/models/{model_id}"))

    async def delete(model_id: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/models/{model_id}", method="DELETE"))

    async def rename(model_id: str, name: str) -> DotDict:
        return wrap_json(await http["request_json"](f"/models/{model_id}", method="PATCH", body={"name": name}))

    return SimpleNamespace(list=list_fn, get=get, delete=delete, rename=rename)


def GagaraBoost(config: GagaraBoostConfig | None = None) -> SimpleNamespace:
    """Create a gagara-boost SDK client.

    Returns a client with:
    - health(): True when the server answers GET /health with a 2xx
    - users, workspaces, datasets, row_sets, column_sets,
      training_param_sets, models: resource managers
    - train, calculate_optimal_param_set, predict,
      predict_with_free_parameter: training and prediction actions
    - get_token / set_token: read or replace the bearer token
    - aclose(): release the default transport's connection pool

    Without a config, settings are read from the environment (and ``.env``):
    GAGARA_BOOST_BASE_URL, GAGARA_BOOST_TOKEN, GAGARA_BOOST_SERVICE_TOKEN,
    GAGARA_BOOST_TIMEOUT_MS.
    """
    if config is None:
        config = config_from_env()

    resolved = resolve_config(config)
    transport = resolved["transport"] or create_httpx_transport()

    http = create_http_client(
        base_url=resolved["base_url"],
        transport=transport,
        token=resolved["token"],
        timeout_ms=resolved["timeout_ms"],
    )

    async def health() -> bool:
        try:
            response = await http["request"]("/health")
        except Exception:
            logger.debug("Health check failed", exc_info=True)
            return False
        return is_success(response)

    async def train(request: TrainingRequest) -> DotDict:
        return wrap_json(await http["request_json"]("/train", method="POST", body=request))

    async def calculate_optimal_param_set(request: OptimalParamSearchRequest) -> DotDict:
        return wrap_json(
            await http["request_json"]("/calculate-optimal-param-set", method="POST", body=request)
        )

    async def predict(model_id: str, request: PredictionRequest) -> DotDict:
        return wrap_json(
            await http["request_json"]("/predict/", method="POST", body=request, params={"id": model_id})
        )

    async def predict_with_free_parameter(model_id: str, request: PredictionWithFreeParameterRequest) -> DotDict:
        return wrap_json(
            await http["request_json"](
                "/predict-with-free-parameter/", method="POST", body=request, params={"id": model_id}
            )
        )

    async def aclose() -> None:
        close = getattr(transport, "aclose", None)
        if close is not None:
            await close()

    return SimpleNamespace(
        health=health,
        users=_create_users_manager(http),
        workspaces=_create_workspaces_manager(http),
        datasets=_create_datasets_manager(http),
        row_sets=_create_row_sets_manager(http),
        column_sets=_create_column_sets_manager(http),
        training_param_sets=_create_training_param_sets_manager(http),
        models=_create_models_manager(http),
        train=train,
        calculate_optimal_param_set=calculate_optimal_param_set,
        predict=predict,
        predict_with_free_parameter=predict_with_free_parameter,
        get_token=http["get_token"],
        set_token=http["set_token"],
        # Support both naming conventions
        getToken=http["get_token"],
        setToken=http["set_token"],
        get_http_client=lambda: http,
        aclose=aclose,
    )


# Alias for snake_case compatibility
create_client = GagaraBoost
