"""Unit tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from huesync.colors import hsv_to_xy
from huesync.exceptions import UnreachableError
from huesync.models import (
    XY,
    AppConfig,
    BridgeConfig,
    CacheBackendType,
    CacheConfig,
    CacheSnapshot,
    DeviceState,
    EntityKind,
    GroupKind,
    GroupRecord,
    LightRecord,
    PerDeviceResult,
    SceneRecord,
    VariationReport,
)


class TestDeviceState:
    """Test DeviceState model."""

    @pytest.mark.unit
    def test_all_fields_optional(self):
        """Test that an empty state is valid and empty."""
        state = DeviceState()
        assert state.is_empty()
        assert state.fields() == {}

    @pytest.mark.unit
    def test_range_validation(self):
        """Test that out-of-range values are rejected."""
        with pytest.raises(ValidationError):
            DeviceState(brightness=101)
        with pytest.raises(ValidationError):
            DeviceState(hue=360)
        with pytest.raises(ValidationError):
            DeviceState(color_temp=100)
        with pytest.raises(ValidationError):
            DeviceState(transition_ms=-1)

    @pytest.mark.unit
    def test_fields_only_present(self):
        """Test that fields() returns only set values, in declaration order."""
        state = DeviceState(brightness=40, on=True)
        assert list(state.fields()) == ["on", "brightness"]

    @pytest.mark.unit
    def test_frozen(self):
        """Test that states cannot be mutated."""
        state = DeviceState(on=True)
        with pytest.raises(ValidationError):
            state.on = False


class TestResolveForWrite:
    """Test color channel precedence in write payloads."""

    @pytest.mark.unit
    def test_hsv_converted_to_xy(self):
        payload = DeviceState(hue=0, saturation=100).resolve_for_write()
        assert payload.hue is None
        assert payload.saturation is None
        assert payload.xy == hsv_to_xy(0, 100, 100)

    @pytest.mark.unit
    def test_hsv_conversion_uses_brightness(self):
        payload = DeviceState(hue=240, saturation=20, brightness=30).resolve_for_write()
        assert payload.xy == hsv_to_xy(240, 20, 30)
        assert payload.brightness == 30

    @pytest.mark.unit
    def test_explicit_xy_wins(self):
        xy = XY(x=0.2, y=0.3)
        payload = DeviceState(hue=0, saturation=100, xy=xy, color_temp=300).resolve_for_write()
        assert payload.xy == xy
        assert payload.hue is None
        assert payload.color_temp is None

    @pytest.mark.unit
    def test_color_temp_beats_hsv(self):
        payload = DeviceState(hue=30, saturation=40, color_temp=370).resolve_for_write()
        assert payload.color_temp == 370
        assert payload.xy is None
        assert payload.hue is None

    @pytest.mark.unit
    def test_hue_alone_is_left_alone(self):
        state = DeviceState(hue=120, on=True)
        assert state.resolve_for_write() == state


class TestRecords:
    """Test entity records."""

    @pytest.mark.unit
    def test_light_apply_state_merges_present_fields(self):
        light = LightRecord(id="1", name="Lamp", on=False, brightness=50)
        patched = light.apply_state(DeviceState(on=True, transition_ms=400))
        assert patched.on is True
        assert patched.brightness == 50
        assert patched is not light
        assert light.on is False

    @pytest.mark.unit
    def test_group_apply_state_sets_any_and_all_on(self):
        group = GroupRecord(id="1", kind=GroupKind.ROOM, light_ids=("1", "2"))
        patched = group.apply_state(DeviceState(on=True, brightness=20))
        assert patched.any_on is True
        assert patched.all_on is True
        assert patched.brightness == 20

    @pytest.mark.unit
    def test_scene_rejects_patch(self):
        with pytest.raises(ValueError):
            SceneRecord(id="s").apply_state(DeviceState(on=True))

    @pytest.mark.unit
    def test_snapshot_records_for(self):
        snapshot = CacheSnapshot(
            bridge_id="b",
            saved_at=1.0,
            lights=[LightRecord(id="1")],
            scenes=[SceneRecord(id="s")],
        )
        assert [r.id for r in snapshot.records_for(EntityKind.LIGHTS)] == ["1"]
        assert snapshot.records_for(EntityKind.GROUPS) == []


class TestVariationReport:
    """Test VariationReport aggregation."""

    @pytest.mark.unit
    def test_summary_names_failures(self):
        report = VariationReport(
            results=[
                PerDeviceResult(device_id="1", applied_state=DeviceState(on=True), success=True),
                PerDeviceResult(
                    device_id="2",
                    applied_state=DeviceState(on=True),
                    success=False,
                    error=UnreachableError("office", "write light 2"),
                ),
            ]
        )
        assert not report.all_succeeded
        assert [r.device_id for r in report.failed] == ["2"]
        summary = report.summary()
        assert "1 of 2" in summary
        assert "2: Could not write light 2" in summary

    @pytest.mark.unit
    def test_all_succeeded(self):
        report = VariationReport(
            results=[PerDeviceResult(device_id="1", applied_state=DeviceState(), success=True)]
        )
        assert report.all_succeeded
        assert len(report) == 1


class TestAppConfig:
    """Test AppConfig model."""

    @pytest.mark.unit
    def test_defaults(self):
        config = AppConfig()
        assert config.bridges == []
        assert config.cache.stale_after_seconds == 300
        assert config.cache.backend is CacheBackendType.MEMORY
        assert config.cache.warm_on_startup is True

    @pytest.mark.unit
    def test_duplicate_bridge_ids_rejected(self):
        with pytest.raises(ValidationError, match="duplicate bridge id"):
            AppConfig(
                bridges=[
                    BridgeConfig(id="a", address="10.0.0.1"),
                    BridgeConfig(id="a", address="10.0.0.2"),
                ]
            )

    @pytest.mark.unit
    def test_intervals_must_be_positive(self):
        with pytest.raises(ValidationError):
            CacheConfig(stale_after_seconds=0)

    @pytest.mark.unit
    def test_enabled_bridges(self):
        config = AppConfig(
            bridges=[
                BridgeConfig(id="a", address="10.0.0.1"),
                BridgeConfig(id="b", address="10.0.0.2", enabled=False),
            ]
        )
        assert [b.id for b in config.enabled_bridges] == ["a"]

    @pytest.mark.unit
    def test_cache_directory_default_follows_xdg(self, isolated_config_home):
        assert CacheConfig().cache_directory() == isolated_config_home / "huesync" / "cache"

    @pytest.mark.unit
    def test_load_missing_returns_defaults(self, temp_dir):
        config = AppConfig.load_or_default(temp_dir / "missing.json")
        assert config == AppConfig()

    @pytest.mark.unit
    def test_save_and_load(self, temp_dir):
        path = temp_dir / "config.json"
        config = AppConfig(bridges=[BridgeConfig(id="a", name="Office", address="10.0.0.1", credential="k")])
        config.save(path)

        loaded = AppConfig.load_or_default(path)
        assert loaded == config
