from config import _origins


def test_origins_split_on_commas():
    assert _origins('http://a.test, http://b.test') == ['http://a.test', 'http://b.test']


def test_wildcard_origin():
    assert _origins('*') == '*'
