from wheeldrive.graph import DataGraph
from wheeldrive.tuning import ProfileData, ProfileDataType


def sample(x):
    return ProfileData(x, x + 1, x + 2, x + 3, x + 4, x + 5)


def test_paused_by_default_ignores_points():
    graph = DataGraph(5)
    graph.add_data_point(sample(1.0))
    assert len(graph) == 0
    assert graph.series(ProfileDataType.INTP_POS) == []


def test_toggle_updates_flips_state():
    graph = DataGraph(5)
    assert graph.toggle_updates() is True
    assert graph.toggle_updates() is False


def test_records_and_indexes_points():
    graph = DataGraph(5)
    graph.toggle_updates()
    graph.add_data_point(sample(1.0))
    graph.add_data_point(sample(2.0))
    assert graph.series(ProfileDataType.INTP_POS) == [(0.0, 1.0), (1.0, 2.0)]
    assert graph.series(ProfileDataType.ACT_VEL) == [(0.0, 6.0), (1.0, 7.0)]


def test_window_drops_oldest():
    graph = DataGraph(3)
    graph.toggle_updates()
    for x in range(5):
        graph.add_data_point(sample(float(x)))
    assert len(graph) == 3
    assert [v for _, v in graph.series(ProfileDataType.INTP_POS)] == [2.0, 3.0, 4.0]


def test_reset_clears_but_keeps_recording():
    graph = DataGraph(3)
    graph.toggle_updates()
    graph.add_data_point(sample(1.0))
    graph.reset()
    assert len(graph) == 0
    graph.add_data_point(sample(9.0))
    assert graph.series(ProfileDataType.INTP_POS) == [(0.0, 9.0)]


def test_all_series_hidden_initially():
    graph = DataGraph(3)
    assert set(graph.visible) == set(ProfileDataType)
    assert not any(graph.visible.values())