import pytest

from reviewapps.services.deploy_config import DeploymentConfigService


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None


def test_preserved_restores_original_bytes(tmp_path):
    config = tmp_path / "fly.toml"
    original = b'app = "placeholder"\n\n[build.args]\n  NODE_ENV = "review"\n'
    config.write_bytes(original)
    service = DeploymentConfigService(logger=DummyLogger())

    with service.preserved(str(config)) as snapshot:
        assert snapshot == original
        config.write_bytes(b'app = "pr-42"\n')

    assert config.read_bytes() == original


def test_preserved_restores_even_when_body_fails(tmp_path):
    config = tmp_path / "fly.toml"
    config.write_bytes(b"original")
    service = DeploymentConfigService(logger=DummyLogger())

    with pytest.raises(RuntimeError):
        with service.preserved(str(config)):
            config.write_bytes(b"mutated")
            raise RuntimeError("launch failed")

    assert config.read_bytes() == b"original"


def test_preserved_keeps_generated_file_when_none_existed(tmp_path):
    config = tmp_path / "fly.toml"
    service = DeploymentConfigService(logger=DummyLogger())

    with service.preserved(str(config)) as snapshot:
        assert snapshot is None
        config.write_text("generated", encoding="utf-8")

    assert config.read_text(encoding="utf-8") == "generated"
