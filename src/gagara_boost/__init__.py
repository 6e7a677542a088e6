"""gagara-boost SDK - async Python client for the gagara-boost training service.

Example:
    import asyncio
    import os
    from gagara_boost import GagaraBoost

    async def main():
        client = GagaraBoost({
            "base_url": "http://localhost:3040",
            "token": os.environ["GAGARA_BOOST_TOKEN"],
        })

        workspace = await client.workspaces.create("demo")

        with open("train.parquet", "rb") as f:
            uploaded = await client.datasets.upload(f, {"workspace_id": workspace.id})

        print(uploaded.dataset_id)
        await client.aclose()

    asyncio.run(main())
"""

import logging

from gagara_boost.client import GagaraBoost, create_client
from gagara_boost.config import config_from_env
from gagara_boost.dotdict import DotDict
from gagara_boost.errors import (
    AuthenticationError,
    CancellationError,
    GagaraBoostError,
    HTTPError,
    NotFoundError,
    ParseError,
    TransportError,
    ValidationError,
)
from gagara_boost.http_client import build_url, create_http_client
from gagara_boost.multipart import MultipartBody, encode_multipart
from gagara_boost.signals import create_abort_controller
from gagara_boost.transport import HttpxTransport, create_httpx_transport
from gagara_boost.types import (
    ColumnSet,
    ColumnSetCreate,
    ColumnSetUpdate,
    DatasetColumnCreate,
    DatasetColumnUpdate,
    DatasetItem,
    DatasetMetaResponse,
    DatasetSchemaResponse,
    ErrorCode,
    ErrorResponse,
    GagaraBoostConfig,
    ModelDetail,
    OptimalParamSearchRequest,
    OptimalParamSearchResponse,
    PredictionRequest,
    PredictionResponse,
    PredictionWithFreeParameterRequest,
    PredictionWithFreeParameterResponse,
    RowSet,
    RowSetCreate,
    RowSetSampleResponse,
    RowSetUpdate,
    StoredDatasetColumn,
    TrainingParamSet,
    TrainingParamSetCreate,
    TrainingParamSetUpdate,
    TrainingRequest,
    TrainingResponse,
    Transport,
    TransportRequest,
    UploadDatasetOptions,
    UploadResponse,
    UserCreateResponse,
    Workspace,
    WorkspaceCreate,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Client
    "GagaraBoost",
    "create_client",
    "config_from_env",
    # Request pipeline
    "build_url",
    "create_http_client",
    "create_httpx_transport",
    "HttpxTransport",
    "create_abort_controller",
    "encode_multipart",
    "MultipartBody",
    "DotDict",
    # Errors
    "GagaraBoostError",
    "TransportError",
    "CancellationError",
    "HTTPError",
    "AuthenticationError",
    "NotFoundError",
    "ParseError",
    "ValidationError",
    # Types
    "GagaraBoostConfig",
    "Transport",
    "TransportRequest",
    "UploadDatasetOptions",
    "ErrorCode",
    "ErrorResponse",
    "UserCreateResponse",
    "Workspace",
    "WorkspaceCreate",
    "DatasetItem",
    "UploadResponse",
    "DatasetSchemaResponse",
    "DatasetMetaResponse",
    "StoredDatasetColumn",
    "DatasetColumnCreate",
    "DatasetColumnUpdate",
    "RowSet",
    "RowSetCreate",
    "RowSetUpdate",
    "RowSetSampleResponse",
    "ColumnSet",
    "ColumnSetCreate",
    "ColumnSetUpdate",
    "TrainingParamSet",
    "TrainingParamSetCreate",
    "TrainingParamSetUpdate",
    "ModelDetail",
    "TrainingRequest",
    "TrainingResponse",
    "OptimalParamSearchRequest",
    "OptimalParamSearchResponse",
    "PredictionRequest",
    "PredictionResponse",
    "PredictionWithFreeParameterRequest",
    "PredictionWithFreeParameterResponse",
]
