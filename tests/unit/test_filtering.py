import json

from wallet_ingest.filtering import address_filter, parse_targets, text_record_filter

A = "1" * 32
B = "So11111111111111111111111111111111111111112"


def test_parse_targets():
    assert parse_targets(None) == []
    assert parse_targets("") == []
    assert parse_targets(f" {A}, ,{B} ") == [A, B]


def test_empty_targets_accept_everything():
    accept = address_filter([])
    assert accept(A) and accept(B) and accept("anything")
    assert address_filter(None)(A)


def test_exact_match():
    accept = address_filter([A])
    assert accept(A)
    assert not accept(B)
    assert not accept(A.lower() + "x")


def test_text_record_filter():
    f = text_record_filter(address_filter([A]))
    assert f(json.dumps({"address": A, "balance": 1}))
    assert not f(json.dumps({"address": B}))
    assert not f(json.dumps({"balance": 1}))
    assert not f(json.dumps([A]))
    assert not f("{not json")


def test_text_record_filter_rejects_deeply_nested_json():
    f = text_record_filter(address_filter([A]))
    assert not f("[" * 100_000 + "]" * 100_000)
