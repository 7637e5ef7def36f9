import json

import pytest

from dbc_items.models import Custom, ItemRecord, Rarity, SupplementalRecord, rarity_from_label
from dbc_items.supplemental import (
    apply_supplemental,
    load_supplemental,
    overlay_supplemental,
    parse_supplemental,
)


def _joined(item_id=100):
    return ItemRecord(id=item_id, name='<unknown>', subclass='Plate',
                      damage='10 - 20', armor='500 Armor', stats=['+5 Strength'])


@pytest.mark.parametrize('label, expected', [
    ('Epic', Rarity.EPIC),
    ('epic', Rarity.EPIC),
    ('LEGENDARY', Rarity.LEGENDARY),
    ('uncommon', Rarity.UNCOMMON),
    ('2', Custom(2)),
    ('3', Custom(3)),
    ('7', Custom(7)),
    ('-1', Custom(-1)),
    ('+7', Custom(7)),
    ('2147483647', Custom(2147483647)),
    ('2147483648', Custom(0)),
    (' 4 ', Custom(0)),
    ('4.0', Custom(0)),
    ('', Custom(0)),
    ('Artifact', Custom(0)),
])
def test_rarity_from_label(label, expected):
    assert rarity_from_label(label) == expected


def test_numeric_type_is_kept_as_custom_rarity():
    item = apply_supplemental(ItemRecord(id=100), SupplementalRecord.from_data({'type': '3'}))
    assert item.rarity == Custom(3)
    assert item.to_data()['rarity'] == {'Custom': 3}


def test_epic_without_stats_keeps_joined_stats():
    item = ItemRecord(id=100)
    apply_supplemental(item, SupplementalRecord.from_data({'name': '', 'type': 'Epic'}))
    assert item.rarity is Rarity.EPIC
    assert item.stats == []
    assert item.name == '<unknown>'


def test_present_non_empty_fields_override():
    item = _joined()
    extra = SupplementalRecord.from_data({
        'name': 'Lionheart Helm',
        'type': 'Epic',
        'stats': ['+18 Strength'],
        'spells': ['Equip: +2% crit'],
        'requires': ['Requires Plate'],
        'requires_level': 50,
        'damage': '1 - 2',
        'added_damage': '+5 Fire',
        'armor': '565 Armor',
        'speed': '2.60',
        'dps': '41.5',
        'bonding': 'Binds when equipped',
        'hands': 'Head',
    })
    apply_supplemental(item, extra)
    assert item.name == 'Lionheart Helm'
    assert item.rarity is Rarity.EPIC
    assert item.stats == ['+18 Strength']
    assert item.spells == ['Equip: +2% crit']
    assert item.requires == ['Requires Plate']
    assert item.required_level == 50
    assert (item.damage, item.added_damage, item.armor) == ('1 - 2', '+5 Fire', '565 Armor')
    assert (item.speed, item.dps, item.bonding, item.hands) == \
        ('2.60', '41.5', 'Binds when equipped', 'Head')


def test_empty_or_absent_fields_never_clear():
    item = _joined()
    apply_supplemental(item, SupplementalRecord.from_data({
        'name': '', 'stats': [], 'damage': '', 'armor': None,
    }))
    assert item.name == '<unknown>'
    assert item.stats == ['+5 Strength']
    assert item.damage == '10 - 20'
    assert item.armor == '500 Armor'
    assert item.rarity is Rarity.COMMON
    assert item.required_level == 0


def test_requires_level_zero_still_overrides():
    item = _joined()
    item.required_level = 40
    apply_supplemental(item, SupplementalRecord.from_data({'name': 'x', 'requires_level': 0}))
    assert item.required_level == 0


def test_supplied_lists_are_copied():
    stats = ['+1 Stamina']
    extra = SupplementalRecord(stats=stats)
    item = apply_supplemental(_joined(), extra)
    item.stats.append('+2 Spirit')
    assert stats == ['+1 Stamina']


def test_overlay_matches_by_stringified_id():
    items = [_joined(100), _joined(200)]
    result = overlay_supplemental(items, {'100': SupplementalRecord(name='Found')})
    assert [i.name for i in result] == ['Found', '<unknown>']


def test_from_data_rejects_bad_types():
    with pytest.raises(ValueError):
        SupplementalRecord.from_data({'name': 'x', 'stats': 'not a list'})
    with pytest.raises(ValueError):
        SupplementalRecord.from_data({'name': 'x', 'requires_level': 'ten'})
    with pytest.raises(ValueError):
        parse_supplemental(['not', 'an', 'object'])


def test_load_supplemental(tmp_path):
    path = tmp_path / 'parsed_items.json'
    path.write_text(json.dumps({
        '100': {'name': 'Thunderfury', 'type': 'Legendary'},
        '200': {'name': '', 'stats': ['+1 Agility']},
    }), encoding='utf-8')
    data = load_supplemental(path)
    assert set(data) == {'100', '200'}
    assert data['100'].rarity_type == 'Legendary'
    assert data['200'].stats == ['+1 Agility']


def test_missing_supplemental_file_is_empty(tmp_path):
    assert load_supplemental(tmp_path / 'absent.json') == {}


def test_broken_supplemental_file_is_empty(tmp_path, caplog):
    path = tmp_path / 'parsed_items.json'
    path.write_text('{"100": {"name": ', encoding='utf-8')
    assert load_supplemental(path) == {}
    assert 'Ignoring supplemental data' in caplog.text


def test_badly_typed_supplemental_file_is_empty(tmp_path):
    path = tmp_path / 'parsed_items.json'
    path.write_text(json.dumps({'100': {'name': 5}}), encoding='utf-8')
    assert load_supplemental(path) == {}
