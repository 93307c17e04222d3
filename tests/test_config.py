"""Unit tests for PipelineConfig."""

from dataclasses import fields

import pytest

from object_corners.config import ENV_PREFIX, PipelineConfig
from object_corners.errors import ContourPreconditionError


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # setenv + delenv makes monkeypatch remove anything load_dotenv adds later
    for f in fields(PipelineConfig):
        name = ENV_PREFIX + f.name.upper()
        monkeypatch.setenv(name, 'unused')
        monkeypatch.delenv(name)
    return tmp_path / 'missing.env'


def test_defaults():
    config = PipelineConfig()
    assert config.border_percentile == 90.0
    assert config.threshold_ratio == 1.5
    assert config.morphology_strength == 3
    assert config.corner_count == 4
    assert config.fill_holes is True
    assert config.debug_dir is None
    assert config.validate() is config


def test_from_env_without_variables(clean_env):
    assert PipelineConfig.from_env(clean_env) == PipelineConfig()


def test_from_env_reads_variables(clean_env, monkeypatch):
    monkeypatch.setenv('OBJECT_CORNERS_CORNER_COUNT', '6')
    monkeypatch.setenv('OBJECT_CORNERS_THRESHOLD_RATIO', '2.5')
    monkeypatch.setenv('OBJECT_CORNERS_FILL_HOLES', 'false')
    monkeypatch.setenv('OBJECT_CORNERS_DEBUG_DIR', '/tmp/debug')

    config = PipelineConfig.from_env(clean_env)
    assert config.corner_count == 6
    assert config.threshold_ratio == 2.5
    assert config.fill_holes is False
    assert config.debug_dir == '/tmp/debug'
    assert config.morphology_strength == 3


def test_from_env_reads_dotenv_file(clean_env, tmp_path):
    dotenv_file = tmp_path / '.env'
    dotenv_file.write_text('OBJECT_CORNERS_MORPHOLOGY_STRENGTH=5\n')

    config = PipelineConfig.from_env(str(dotenv_file))
    assert config.morphology_strength == 5


def test_from_env_invalid_number(clean_env, monkeypatch):
    monkeypatch.setenv('OBJECT_CORNERS_CORNER_COUNT', 'four')
    with pytest.raises(ContourPreconditionError):
        PipelineConfig.from_env(clean_env)


@pytest.mark.parametrize('kwargs', [
    {'corner_count': 1},
    {'morphology_strength': -1},
    {'border_percentile': 120.0},
    {'threshold_ratio': 0.0},
    {'min_object_area': -5},
])
def test_validate_rejects_bad_values(kwargs):
    with pytest.raises(ContourPreconditionError):
        PipelineConfig(**kwargs).validate()


def test_with_overrides_skips_none():
    config = PipelineConfig().with_overrides(corner_count=5, debug_dir=None, fill_holes=False)
    assert config.corner_count == 5
    assert config.debug_dir is None
    assert config.fill_holes is False
