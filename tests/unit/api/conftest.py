from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tempdrop.config import AppConfig
from tempdrop.main import create_app
from tempdrop.storage.object_store import ObjectStore


@pytest.fixture()
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(data_root=tmp_path, max_upload_bytes=64)


@pytest.fixture()
def app(app_config: AppConfig, store: ObjectStore) -> FastAPI:
    application = create_app(app_config, store=store)
    application.state.disable_reclamation = True
    return application


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    with TestClient(app) as test_client:
        yield test_client
