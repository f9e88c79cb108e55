"""create_app と server.main モジュールのテスト。"""

import importlib

from fastapi import FastAPI

import restful.dependencies as dependencies
import restful.server.main as main


class TestModuleImport:
    """モジュールの import だけでは Store もログ設定も作られない。"""

    def test_import_builds_no_singletons(self, monkeypatch, tmp_path):
        db_path = tmp_path / "data" / "store.db"
        monkeypatch.setenv("RESTFUL_STORE_BACKEND", "sqlite")
        monkeypatch.setenv("RESTFUL_DB_PATH", str(db_path))
        dependencies._reset_all()
        try:
            importlib.reload(main)
            assert dependencies._store is None
            assert dependencies._handler is None
            assert not db_path.parent.exists()
        finally:
            dependencies._reset_all()

    def test_no_module_level_app(self):
        assert not hasattr(main, "app")


class TestCreateApp:
    def test_builds_from_settings_on_call(self, monkeypatch):
        monkeypatch.setenv("RESTFUL_STORE_BACKEND", "memory")
        dependencies._reset_all()
        try:
            app = main.create_app()
            assert isinstance(app, FastAPI)
            assert dependencies._handler is not None
        finally:
            dependencies._reset_all()
