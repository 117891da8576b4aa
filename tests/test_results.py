"""Results directory and response persistence."""

import json
import re

from datahunter.storage.results import ensure_results_dir, generate_id, response_filename, save_response


def test_ensure_results_dir_creates_nested(tmp_path):
    target = tmp_path / 'a' / 'b'

    assert ensure_results_dir(target) == target
    assert target.is_dir()


def test_ensure_results_dir_is_idempotent(tmp_path):
    ensure_results_dir(tmp_path)

    assert ensure_results_dir(str(tmp_path)) == tmp_path


def test_response_filename_format():
    name = response_filename('query')

    assert re.fullmatch(r'query-\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}-\d{3}Z\.json', name)


def test_save_response_writes_pretty_json(tmp_path):
    data = {'rows': [{'name': 'João'}], 'total': 1}

    path = save_response(data, tmp_path / 'out', 'response')

    assert path.parent == tmp_path / 'out'
    assert path.name.startswith('response-')
    assert json.loads(path.read_text(encoding='utf-8')) == data
    assert '\n  "rows"' in path.read_text(encoding='utf-8')


def test_generate_id():
    assert re.fullmatch(r'[0-9a-f]{16}', generate_id())
    assert len(generate_id(4)) == 8
    assert generate_id() != generate_id()
