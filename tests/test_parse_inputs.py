from parse_inputs import dump_file_for, parse_dump_line, parse_fsts_from_dump, parse_terminals


def test_parse_terminals_recovers_triples_in_order(run_dir):
    terminals = parse_terminals(str(run_dir / "terminals.txt"))
    assert [(t['x'], t['y'], t['battery']) for t in terminals] == [
        (0.1, 0.2, 85.0),
        (0.8, 0.3, 55.5),
        (0.5, 0.9, 15.2),
        (0.3, 0.6, 42.0),
    ]
    assert [t['id'] for t in terminals] == [0, 1, 2, 3]
    assert all(t['covered'] for t in terminals)


def test_parse_terminals_skips_malformed_lines(tmp_path):
    path = tmp_path / "terminals.txt"
    path.write_text("0.1 0.2 50\nbad line here\n0.3\n\n0.4 0.5 60 extra\n")
    terminals = parse_terminals(str(path))
    assert [(t['id'], t['x'], t['battery']) for t in terminals] == [(0, 0.1, 50.0), (1, 0.4, 60.0)]


def test_parse_terminals_truncates_at_capacity(tmp_path, capsys):
    path = tmp_path / "terminals.txt"
    path.write_text("".join(f"0.{i} 0.5 50\n" for i in range(1, 8)))
    terminals = parse_terminals(str(path), max_terminals=5)
    assert len(terminals) == 5
    assert "2 terminals beyond the limit of 5" in capsys.readouterr().err


def test_parse_terminals_missing_file_returns_none(tmp_path):
    assert parse_terminals(str(tmp_path / "missing.txt")) is None


def test_dump_single_line_three_terminals(tmp_path):
    path = tmp_path / "fsts_dump.txt"
    path.write_text("4 1 0\n")
    fsts = parse_fsts_from_dump(str(path))
    assert len(fsts) == 1
    assert fsts[0]['id'] == 0
    assert fsts[0]['terminals'] == [4, 1, 0]
    assert fsts[0]['num_steiner_points'] == 1
    assert fsts[0]['steiner_points'] == []
    assert fsts[0]['selected'] is False


def test_dump_skips_debug_and_blank_lines_without_counting(run_dir):
    fsts = parse_fsts_from_dump(str(run_dir / "fsts_dump.txt"), num_terminals=4)
    assert [f['id'] for f in fsts] == [0, 1, 2, 3]
    assert [f['terminals'] for f in fsts] == [[0, 1], [1, 2, 3], [3, 0], [2, 3]]
    assert [f['num_steiner_points'] for f in fsts] == [0, 1, 0, 0]


def test_dump_line_skips_bad_tokens():
    assert parse_dump_line("3 x -1 7abc 99 2", num_terminals=10) == [3, 7, 2]


def test_dump_line_caps_terminals_per_tree():
    assert parse_dump_line(" ".join(str(i) for i in range(15)), num_terminals=50) == list(range(10))


def test_dump_requires_two_terminals(tmp_path):
    path = tmp_path / "fsts_dump.txt"
    path.write_text("5\n1 60\n2 3\n")
    fsts = parse_fsts_from_dump(str(path), num_terminals=10)
    assert [(f['id'], f['terminals']) for f in fsts] == [(0, [2, 3])]


def test_dump_missing_file_is_empty(tmp_path):
    assert parse_fsts_from_dump(str(tmp_path / "missing.txt")) == []


def test_dump_file_lives_next_to_fsts_file(tmp_path):
    assert dump_file_for(str(tmp_path / "fsts.txt")) == str(tmp_path / "fsts_dump.txt")
    assert dump_file_for("fsts.txt") == "fsts_dump.txt"


def test_parse_terminals_reads_one_terminal_per_line(tmp_path):
    path = tmp_path / "terminals.txt"
    path.write_text("0.1 0.2 50 0.3 0.4 60\n0.5 0.6 70\n")
    terminals = parse_terminals(str(path))
    assert [(t['x'], t['y'], t['battery']) for t in terminals] == [(0.1, 0.2, 50.0), (0.5, 0.6, 70.0)]
