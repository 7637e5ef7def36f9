import os
import sys

import pytest

from dbc_items import archives
from dbc_items.archives import collect_archive_paths, collect_archives, open_archive
from dbc_items.errors import ArchiveListingError, ArchiveOpenError


def _touch(directory, *names):
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / name).write_bytes(b'')


def test_collect_archives_filters_and_sorts(tmp_path):
    _touch(tmp_path, 'patch.MPQ', 'common.MPQ', 'expansion.mpq', 'speech.MPQ',
           'Speech-enUS.mpq', 'readme.txt', 'lichking.MPQ.bak')
    names = [p.name for p in collect_archives(tmp_path)]
    assert names == ['common.MPQ', 'expansion.mpq', 'patch.MPQ']


def test_collect_archives_skips_directories(tmp_path):
    (tmp_path / 'odd.mpq').mkdir()
    _touch(tmp_path, 'common.MPQ')
    assert [p.name for p in collect_archives(tmp_path)] == ['common.MPQ']


def test_missing_directory_is_empty(tmp_path):
    assert collect_archives(tmp_path / 'enUS') == []


def test_localized_archives_come_after_root(tmp_path):
    _touch(tmp_path, 'patch-3.MPQ', 'common.MPQ')
    _touch(tmp_path / 'enUS', 'patch-enUS.MPQ', 'locale-enUS.MPQ')
    names = [p.relative_to(tmp_path).as_posix() for p in collect_archive_paths(tmp_path)]
    assert names == ['common.MPQ', 'patch-3.MPQ', 'enUS/locale-enUS.MPQ', 'enUS/patch-enUS.MPQ']


def test_root_without_locale_dir(tmp_path):
    _touch(tmp_path, 'common.MPQ')
    assert [p.name for p in collect_archive_paths(tmp_path)] == ['common.MPQ']


def test_missing_root_is_a_listing_error(tmp_path):
    with pytest.raises(ArchiveListingError):
        collect_archive_paths(tmp_path / 'nope')


@pytest.mark.skipif(sys.platform == 'win32' or os.geteuid() == 0,
                    reason='needs POSIX permissions as a non-root user')
def test_unreadable_root_is_a_listing_error(tmp_path):
    data_dir = tmp_path / 'Data'
    _touch(data_dir, 'common.MPQ')
    data_dir.chmod(0o000)
    try:
        with pytest.raises(ArchiveListingError):
            collect_archive_paths(data_dir)
    finally:
        data_dir.chmod(0o755)


def test_open_archive_wraps_failures(tmp_path):
    bogus = tmp_path / 'broken.MPQ'
    bogus.write_bytes(b'not an archive at all')
    with pytest.raises(ArchiveOpenError, match='broken.MPQ'):
        open_archive(bogus)


class FakeHandle:
    closed = False

    def close(self):
        self.closed = True


def _fake_mpq(files):
    class FakeMPQ:
        def __init__(self, filename, listfile=True):
            assert listfile is False
            self.filename = filename
            self.file = FakeHandle()

        def read_file(self, name):
            return files.get(name)

    return FakeMPQ


def test_mpq_archive_adapter(monkeypatch, tmp_path):
    monkeypatch.setattr(archives.mpyq, 'MPQArchive', _fake_mpq({
        '(listfile)': b'DBFilesClient\\Item.dbc\r\nInterface\\readme.txt\r\n',
        'DBFilesClient\\Item.dbc': b'WDBC',
    }))

    with open_archive(tmp_path / 'common.MPQ') as archive:
        assert archive.list() == ['DBFilesClient\\Item.dbc', 'Interface\\readme.txt']
        assert archive.read_file('DBFilesClient\\Item.dbc') == b'WDBC'
        with pytest.raises(archives.ArchiveReadError, match='missing'):
            archive.read_file('Interface\\readme.txt')
        handle = archive._mpq.file
    assert handle.closed


def test_archive_without_listfile_lists_nothing(monkeypatch, tmp_path):
    monkeypatch.setattr(archives.mpyq, 'MPQArchive', _fake_mpq({'DBFilesClient\\Item.dbc': b'WDBC'}))

    with open_archive(tmp_path / 'patch-2.MPQ') as archive:
        assert archive.list() == []
