from chunkstore.strategy import should_chunk


def test_threshold_boundary():
    assert should_chunk("a" * 20_000) is False
    assert should_chunk("a" * 20_001) is True


def test_small_content_with_references_is_chunked():
    assert should_chunk('<net k="0x1" v="0.0.1" />') is True


def test_custom_threshold():
    assert should_chunk("abc", threshold=2) is True
    assert should_chunk("", threshold=0) is False
