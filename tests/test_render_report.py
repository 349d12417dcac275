import pytest

from config import SimulationError
from render_report import (count_components, create_rich_visualization, fst_edges,
                           get_battery_color, render_html, render_svg, scale_coordinates)


def _terminal(i, x, y, battery=50.0, covered=True):
    return {'id': i, 'x': x, 'y': y, 'battery': battery, 'covered': covered}


def _fst(fst_id, terminals, steiner=None):
    return {'id': fst_id, 'terminals': terminals, 'terminal_count': len(terminals),
            'steiner_points': [steiner] if steiner else [],
            'num_steiner_points': 1 if steiner else 0, 'selected': True, 'cost': None}


def test_scale_coordinates_corners():
    assert scale_coordinates(0.0, 0.0) == (50.0, 550.0)
    assert scale_coordinates(1.0, 1.0) == (750.0, 50.0)


def test_scale_coordinates_monotonic_and_flipped():
    xs = [0.0, 0.1, 0.1001, 0.5, 0.9999, 1.0]
    scaled = [scale_coordinates(v, v) for v in xs]
    for (x1, y1), (x2, y2) in zip(scaled, scaled[1:]):
        assert x2 > x1
        assert y2 < y1
    for sx, sy in scaled:
        assert 50 <= sx <= 750
        assert 50 <= sy <= 550


@pytest.mark.parametrize("battery,color", [
    (100.0, "#27ae60"), (80.0, "#27ae60"), (79.9, "#52c41a"), (60.0, "#52c41a"),
    (45.0, "#f39c12"), (20.0, "#e67e22"), (19.9, "#e74c3c"), (0.0, "#e74c3c"),
])
def test_battery_bands(battery, color):
    assert get_battery_color(battery) == color


def test_fst_edges_junction_and_fallback():
    terminals = [_terminal(0, 0.0, 0.0), _terminal(1, 1.0, 0.0), _terminal(2, 0.0, 1.0)]

    spokes = fst_edges(_fst(0, [0, 1, 2], steiner=(0.5, 0.5)), terminals)
    assert len(spokes) == 3
    assert all(edge[:2] == (400.0, 300.0) for edge in spokes)

    chain = fst_edges(_fst(1, [0, 1, 2]), terminals)
    assert chain == [(50.0, 550.0, 750.0, 550.0), (750.0, 550.0, 50.0, 50.0)]


def test_fst_edges_skip_unknown_terminals():
    terminals = [_terminal(0, 0.0, 0.0), _terminal(1, 1.0, 0.0)]
    assert len(fst_edges(_fst(0, [0, 1, 9]), terminals)) == 1
    assert len(fst_edges(_fst(1, [0, 9], steiner=(0.5, 0.5)), terminals)) == 1


def test_render_svg_stroke_styles():
    terminals = [_terminal(0, 0.2, 0.2, covered=True), _terminal(1, 0.8, 0.8, battery=10.0, covered=False)]
    svg = "\n".join(render_svg(terminals, [_fst(0, [0, 1])]))
    assert svg.startswith('<svg width="800" height="600"')
    assert 'stroke="#333" stroke-width="2"' in svg
    assert 'stroke-dasharray="5,3"' in svg
    assert 'fill="#e74c3c"' in svg
    assert svg.count("<line") == 1


def test_count_components():
    assert count_components([]) == 0
    assert count_components([_fst(0, [0, 1]), _fst(1, [1, 2])]) == 1
    assert count_components([_fst(0, [0, 1]), _fst(1, [2, 3])]) == 2


def test_render_html_with_no_terminals():
    page = render_html([], [], [], None, {})
    assert "<strong>Coverage Rate:</strong></td><td>0.0%</td>" in page
    assert "<strong>MIP Gap:</strong></td><td>Not available</td>" in page


def test_create_rich_visualization(run_dir):
    html_file = run_dir / "visualization.html"
    model = create_rich_visualization(str(run_dir / "terminals.txt"), str(run_dir / "fsts.txt"),
                                      str(run_dir / "solution.txt"), str(html_file))
    page = html_file.read_text(encoding="utf-8")

    assert "<strong>Selected FSTs:</strong></td><td>2 of 4</td>" in page
    assert "<strong>Covered Terminals:</strong></td><td>3</td>" in page
    assert "<strong>Coverage Rate:</strong></td><td>75.0%</td>" in page
    assert "<strong>MIP Gap:</strong></td><td>16.6667% (0.166667)</td>" in page
    assert "<strong>Budget:</strong></td><td>1,500,000</td>" in page
    assert "<strong>Total Cost:</strong></td><td>14.490</td>" in page
    assert "T3 uncovered" in page
    assert "Y-junction" in page
    assert page.count('class="fst-selected"') == 2

    assert model['selected_ids'] == [0, 1]
    assert model['selected_fsts'][1]['steiner_points'] == [(0.6, 0.5)]


def test_create_rich_visualization_missing_dump_degrades(run_dir):
    (run_dir / "fsts_dump.txt").unlink()
    html_file = run_dir / "out.html"
    create_rich_visualization(str(run_dir / "terminals.txt"), str(run_dir / "fsts.txt"),
                              str(run_dir / "solution.txt"), str(html_file), budget=2000)
    page = html_file.read_text(encoding="utf-8")
    assert "<td>0 of 0</td>" in page
    assert "<strong>Budget:</strong></td><td>2,000</td>" in page


def test_create_rich_visualization_requires_terminals(tmp_path):
    (tmp_path / "terminals.txt").write_text("")
    with pytest.raises(SimulationError):
        create_rich_visualization(str(tmp_path / "terminals.txt"), str(tmp_path / "fsts.txt"),
                                  str(tmp_path / "solution.txt"), str(tmp_path / "out.html"))


def test_create_rich_visualization_unwritable_output(run_dir):
    with pytest.raises(SimulationError):
        create_rich_visualization(str(run_dir / "terminals.txt"), str(run_dir / "fsts.txt"),
                                  str(run_dir / "solution.txt"), str(run_dir / "no_dir" / "out.html"))
