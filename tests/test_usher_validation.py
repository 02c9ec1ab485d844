from types import SimpleNamespace

import pytest

from ushering.services.usher_validation import (
    ValidationResult,
    find_duplicate_names,
    validate_usher_names,
    validate_usher_roles,
)


def _entries(*names):
    return [{"name": name} for name in names]


def test_distinct_well_formed_names_are_valid():
    result = validate_usher_names(_entries("Agnes Maria", "Benediktus", "Mary Jane"))

    assert result == ValidationResult(is_valid=True)
    assert result.error is None


def test_empty_list_is_valid():
    assert validate_usher_names([]).is_valid is True


def test_accepts_objects_with_name_attribute():
    entries = [SimpleNamespace(name="Yohanes"), SimpleNamespace(name="Paulus")]

    assert validate_usher_names(entries).is_valid is True


def test_duplicates_list_every_repeat_after_the_first():
    result = validate_usher_names(_entries("Anna", "Budi", "Anna", "Citra", "Budi", "Anna"))

    assert result.is_valid is False
    assert result.error == "Nama petugas tidak boleh duplikat: Anna, Budi, Anna"


def test_duplicate_check_runs_before_name_rules():
    result = validate_usher_names(_entries("Al", "Jean-Paul", "Jean-Paul"))

    assert result.error == "Nama petugas tidak boleh duplikat: Jean-Paul"


def test_find_duplicate_names_keeps_input_order():
    assert find_duplicate_names(["b", "a", "b", "a", "c"]) == ["b", "a"]
    assert find_duplicate_names(["a", "b"]) == []


@pytest.mark.parametrize("name", ["Al", "A" * 51, ""])
def test_length_bounds(name):
    result = validate_usher_names(_entries(name))

    assert result.is_valid is False
    assert result.error == f"Panjang nama petugas minimum 3/maksimum 50 karakter: {name}"


def test_length_boundaries_pass():
    assert validate_usher_names(_entries("Aab")).is_valid is True
    assert validate_usher_names(_entries("Ab" * 25)).is_valid is True


def test_repeated_character_run_is_rejected():
    result = validate_usher_names(_entries("Baaar"))

    assert result.is_valid is False
    assert result.error == "Mohon ketik nama petugas dengan benar: Baaar"


def test_run_of_three_is_rejected_anywhere_but_pairs_pass():
    assert validate_usher_names(_entries("Baarrr")).is_valid is False
    assert validate_usher_names(_entries("Baarr")).is_valid is True


def test_repeated_character_check_is_case_sensitive():
    assert validate_usher_names(_entries("Aaab")).is_valid is True


@pytest.mark.parametrize("name", ["Jean-Paul", "O'Brien", "José Maria", "Agus 2"])
def test_charset_rejects_non_letters(name):
    result = validate_usher_names(_entries(name))

    assert result.is_valid is False
    assert result.error == f"Nama petugas hanya boleh mengandung huruf: {name}"


def test_first_failing_name_wins():
    result = validate_usher_names(_entries("Benediktus", "O'Brien", "Al"))

    assert result.error == "Nama petugas hanya boleh mengandung huruf: O'Brien"


def _roles(ppg, kolekte, others):
    entries = [{"name": f"ppg{i}", "is_ppg": True} for i in range(ppg)]
    entries += [{"name": f"kolekte{i}", "is_kolekte": True} for i in range(kolekte)]
    entries += [{"name": f"other{i}"} for i in range(others)]
    return entries


def test_roles_pass_with_expected_composition():
    assert validate_usher_roles(_roles(2, 3, 1), require_ppg=True).is_valid is True


def test_roles_require_exact_ppg_count_when_ppg_required():
    result = validate_usher_roles(_roles(1, 3, 2), require_ppg=True)

    assert result.error == "Jumlah PPG harus tepat 2 orang, saat ini: 1 orang"


def test_roles_ignore_ppg_count_when_not_required():
    assert validate_usher_roles(_roles(0, 3, 3), require_ppg=False).is_valid is True


def test_roles_require_exact_kolekte_count():
    result = validate_usher_roles(_roles(2, 2, 2), require_ppg=True)

    assert result.error == "Jumlah Kolekte harus tepat 3 orang, saat ini: 2 orang"


def test_roles_require_minimum_total():
    result = validate_usher_roles(_roles(2, 3, 0), require_ppg=True)

    assert result.error == "Jumlah petugas minimal 6 orang, saat ini: 5 orang"


def test_roles_thresholds_are_configurable():
    result = validate_usher_roles(_roles(0, 1, 0), require_ppg=False, required_kolekte=1, min_total=1)

    assert result.is_valid is True
