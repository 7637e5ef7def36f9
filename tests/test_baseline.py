import openpyxl
import pytest

from dbc_items.baseline import BaselineChecker, filter_by_level, load_baseline_ids
from dbc_items.errors import BaselineLoadError
from dbc_items.models import ItemRecord


def _write_csv(path, lines):
    path.write_text('\n'.join(lines) + '\n', encoding='utf-8')
    return path


def test_level_filter_keeps_60_and_drops_61():
    items = [ItemRecord(id=1, required_level=60), ItemRecord(id=2, required_level=61),
             ItemRecord(id=3, required_level=0)]
    assert [i.id for i in filter_by_level(items)] == [1, 3]
    assert [i.id for i in filter_by_level(items, max_level=70)] == [1, 2, 3]


def test_load_csv_baseline_skips_bad_rows(tmp_path):
    path = _write_csv(tmp_path / 'item_template.csv', [
        'entry,class,subclass,name',
        '25,2,7,"Worn Shortsword"',
        '35,2,10,Bent Staff',
        'abc,0,0,broken',
        '',
        ' 36 ,2,4,Worn Mace',
        '-,0,0,dash',
    ])
    assert load_baseline_ids(path) == {25, 35, 36}


def test_header_row_is_not_an_entry(tmp_path):
    path = _write_csv(tmp_path / 'item_template.csv', ['1,2,3', '25,2,7'])
    assert load_baseline_ids(path) == {25}


def test_load_xlsx_baseline(tmp_path):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.append(['entry', 'name'])
    ws.append([25, 'Worn Shortsword'])
    ws.append(['35', 'Bent Staff'])
    ws.append([36.0, 'Worn Mace'])
    ws.append(['n/a', 'broken'])
    ws.append([None, 'empty'])
    path = tmp_path / 'item_template.xlsx'
    wb.save(path)
    assert load_baseline_ids(path) == {25, 35, 36}


def test_missing_baseline_is_fatal(tmp_path):
    with pytest.raises(BaselineLoadError, match='absent.csv'):
        BaselineChecker.from_file(tmp_path / 'absent.csv')


def test_damaged_xlsx_is_fatal(tmp_path):
    path = tmp_path / 'item_template.xlsx'
    path.write_bytes(b'this is not a zip file')
    with pytest.raises(BaselineLoadError):
        load_baseline_ids(path)


def test_checker(tmp_path):
    path = _write_csv(tmp_path / 'item_template.csv', ['entry,name', '100,Known'])
    checker = BaselineChecker.from_file(path)
    assert len(checker) == 1
    assert not checker.is_item_new(100)
    assert checker.is_item_new(101)
    assert checker.check_items_batch([100, 101]) == [(100, False), (101, True)]


def test_filter_new_ignores_other_fields():
    checker = BaselineChecker([100])
    items = [ItemRecord(id=100, name='Fancy', required_level=1), ItemRecord(id=101)]
    assert [i.id for i in checker.filter_new(items)] == [101]
