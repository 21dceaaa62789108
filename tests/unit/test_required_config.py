# tests/unit/test_required_config.py
import pytest

from app.adapters.skusavvy import SkuSavvyDirectory, _shipment_id_var
from app.api.deps import build_directory, build_reassign_config, build_reassign_service
from app.services.pickup_reassign_types import ReassignConfig

pytestmark = pytest.mark.grp_reassign


@pytest.mark.parametrize("target", ["", "   "])
def test_empty_pickup_warehouse_is_refused(target):
    with pytest.raises(ValueError, match="PICKUP_WAREHOUSE_ID"):
        ReassignConfig(target_warehouse_id=target)


def test_build_reassign_config_requires_pickup_warehouse(settings):
    settings.PICKUP_WAREHOUSE_ID = ""
    with pytest.raises(ValueError, match="PICKUP_WAREHOUSE_ID"):
        build_reassign_config(settings)
    with pytest.raises(ValueError):
        build_reassign_service(settings)


def test_empty_graphql_endpoint_is_refused(settings):
    with pytest.raises(ValueError, match="SKUSAVVY_GRAPHQL_ENDPOINT"):
        SkuSavvyDirectory("", "token")
    settings.SKUSAVVY_GRAPHQL_ENDPOINT = " "
    with pytest.raises(ValueError, match="SKUSAVVY_GRAPHQL_ENDPOINT"):
        build_directory(settings)


@pytest.mark.parametrize(
    "raw, expected",
    [("41", 41), (" 7 ", 7), ("-3", -3), ("--7", "--7"), ("²", "²"), ("shp_9", "shp_9")],
)
def test_shipment_id_variable_falls_back_to_text(raw, expected):
    assert _shipment_id_var(raw) == expected
