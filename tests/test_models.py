from cellevac.models import (
    ActualLRP,
    ActualLRPFilter,
    ActualLRPInstanceKey,
    ActualLRPKey,
    Container,
    ContainerState,
    LogConfig,
    Presence,
)


def test_source_name_and_tags():
    config = LogConfig(guid="log-guid-1", source_name="source-name-1", index=1,
                       tags={"extra": "x"})
    name, tags = config.source_name_and_tags()
    assert name == "source-name-1"
    assert tags["source_id"] == "log-guid-1"
    assert tags["instance_id"] == "1"
    assert tags["extra"] == "x"
    assert config.tags == {"extra": "x"}


def test_filter_equality():
    assert ActualLRPFilter(cell_id="the-cell-id") == ActualLRPFilter(cell_id="the-cell-id")
    assert ActualLRPFilter().cell_id == ""


def test_actual_lrp_defaults_to_ordinary():
    lrp = ActualLRP(ActualLRPKey("pg", 0, "d"), ActualLRPInstanceKey("ig", "c"))
    assert lrp.presence is Presence.ORDINARY


def test_container_defaults():
    container = Container(guid="container1")
    assert container.state is ContainerState.RUNNING
    assert container.run_info.log_config.source_name_and_tags()[1]["instance_id"] == "0"