"""Test payload codecs."""

import pytest

from esg_cache.cache.codec import JSON_CODEC, PayloadCodec
from esg_cache.exceptions import SerializationError
from esg_cache.models.esg import ESGScores


class TestPayloadCodec:
    """Test payload codec."""

    def test_should_encode_model_with_provider_aliases(self, sample_scores):
        """Test model encoding."""
        raw = PayloadCodec(ESGScores).encode(sample_scores)

        assert raw["symbol"] == "AAPL"
        assert raw["esgScore"] == 60.0

    def test_should_decode_model(self, sample_scores):
        """Test model decoding."""
        codec = PayloadCodec(ESGScores)

        assert codec.decode(codec.encode(sample_scores)) == sample_scores

    def test_should_decode_lists(self, sample_scores):
        """Test list payloads."""
        codec = PayloadCodec(list[ESGScores])

        decoded = codec.decode(codec.encode([sample_scores, sample_scores]))

        assert len(decoded) == 2
        assert decoded[0] == sample_scores

    def test_should_raise_on_invalid_payload(self):
        """Test decode failure."""
        with pytest.raises(SerializationError):
            PayloadCodec(ESGScores).decode({"symbol": "X"})

    def test_should_measure_compact_json_bytes(self):
        """Test payload size."""
        assert JSON_CODEC.payload_size({"a": 1}) == len('{"a":1}')
        assert JSON_CODEC.payload_size({"blob": "x" * 189}) == 200

    def test_should_measure_multibyte_characters(self):
        """Test size counts UTF-8 bytes."""
        assert JSON_CODEC.payload_size("é") == 4

    def test_should_raise_on_unserializable_size(self):
        """Test size calculation failure."""
        with pytest.raises(SerializationError):
            JSON_CODEC.payload_size({"a": object()})

    def test_should_reject_value_not_matching_payload_type(self):
        """Test encode validates before serializing."""
        with pytest.raises(SerializationError):
            PayloadCodec(ESGScores).encode({"symbol": "AAPL", "note": "raw provider dict"})

    def test_should_encode_provider_shaped_dict(self):
        """Test dicts that validate are encoded as the model."""
        raw = PayloadCodec(ESGScores).encode(
            {
                "symbol": "AAPL",
                "esgScore": 60,
                "environmentScore": 65,
                "socialScore": 55,
                "governanceScore": 61,
            }
        )

        assert raw["esgScore"] == 60.0
        assert raw["date"] is None
