from plot_network import fst_segments, plot_network
from render_report import load_solution_model


def test_fst_segments():
    terminals = [{'id': 0, 'x': 0.0, 'y': 0.0}, {'id': 1, 'x': 1.0, 'y': 0.0}, {'id': 2, 'x': 0.0, 'y': 1.0}]
    junction = {'terminals': [0, 1, 2], 'steiner_points': [(0.3, 0.3)]}
    chain = {'terminals': [0, 1, 5], 'steiner_points': []}
    assert fst_segments(junction, terminals) == [((0.3, 0.3), (0.0, 0.0)),
                                                 ((0.3, 0.3), (1.0, 0.0)),
                                                 ((0.3, 0.3), (0.0, 1.0))]
    assert fst_segments(chain, terminals) == [((0.0, 0.0), (1.0, 0.0))]


def test_plot_network_writes_figure(run_dir):
    model = load_solution_model(str(run_dir / "terminals.txt"), str(run_dir / "fsts.txt"),
                                str(run_dir / "solution.txt"))
    output = run_dir / "network.png"
    plot_network(model['terminals'], model['selected_fsts'], model['gap'], str(output))
    assert output.exists()
    assert output.stat().st_size > 0


def test_plot_network_without_solution(tmp_path):
    output = tmp_path / "empty.png"
    plot_network([], [], None, str(output))
    assert output.exists()
