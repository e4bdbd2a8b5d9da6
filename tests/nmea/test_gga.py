"""Tests for GGA sentence decoding and encoding."""

from datetime import datetime, timedelta, timezone

import pytest

from ntrip.geodesy import geodetic_to_ecef
from ntrip.nmea import (
    GGASentence,
    Location,
    calculate_checksum,
    decode,
    decode_gga,
    encode,
    encode_gga,
    format_checksum,
    validate_checksum,
)

SAMPLE = "$GPGGA,053204.02,3723.1018333,N,12205.3972723,W,1,00,1.0,39.662,M,-33.027,M,0.0,*40"
SAMPLE_LATITUDE = 37 + 23.1018333 / 60
SAMPLE_LONGITUDE = -(122 + 5.3972723 / 60)


def _with_checksum(body: str) -> str:
    """Wrap sentence content in '$' and a correct checksum."""
    return f"${body}*{format_checksum(calculate_checksum(body))}"


class TestDecodeGGA:
    def test_sample_sentence(self):
        result = decode_gga(SAMPLE)
        assert result.valid is True
        assert result.raw == SAMPLE
        assert result.sentence_type == "GPGGA"
        assert result.fix_quality == 1
        assert result.satellites == 0
        assert result.hdop == pytest.approx(1.0)
        assert result.altitude == pytest.approx(39.662)
        assert result.altitude_unit == "M"
        assert result.geoidal_separation == pytest.approx(-33.027)
        assert result.geoidal_separation_unit == "M"

    def test_location_forms(self):
        location = decode_gga(SAMPLE).location
        assert location is not None
        assert location.point["type"] == "Point"
        latitude, longitude = location.point["coordinates"]
        assert latitude == pytest.approx(SAMPLE_LATITUDE)
        assert longitude == pytest.approx(SAMPLE_LONGITUDE)
        assert location.dmm.latitude == "3723.1018333,N"
        assert location.dmm.longitude == "12205.3972723,W"
        assert location.ecef == pytest.approx(
            geodetic_to_ecef(SAMPLE_LATITUDE, SAMPLE_LONGITUDE)
        )

    def test_timestamp_is_utc_time_of_today(self):
        before = datetime.now(timezone.utc).date()
        timestamp = decode_gga(SAMPLE).timestamp
        after = datetime.now(timezone.utc).date()
        assert timestamp is not None
        assert timestamp.tzinfo == timezone.utc
        assert timestamp.date() in (before, after)
        assert (timestamp.hour, timestamp.minute, timestamp.second) == (5, 32, 4)
        assert timestamp.microsecond == 20_000

    def test_age_read_from_fifteen_fields(self):
        result = decode_gga(SAMPLE)
        assert result.age_of_differential == pytest.approx(0.0)
        assert result.reference_station_id is None

    def test_station_id_needs_sixteen_fields(self):
        sentence = _with_checksum(
            "GNGGA,081836.00,3723.46587,N,12202.26957,W,4,12,0.7,10.5,M,-30.0,M,1.0,0000"
        )
        result = decode_gga(sentence)
        assert result.valid is True
        assert result.age_of_differential == pytest.approx(1.0)
        assert result.reference_station_id is None

    def test_station_id_with_sixteen_fields(self):
        sentence = _with_checksum(
            "GPGGA,053204.02,3723.1018333,N,12205.3972723,W,2,08,1.0,39.662,M,-33.027,M,1.5,0123,"
        )
        result = decode_gga(sentence)
        assert result.valid is True
        assert result.age_of_differential == pytest.approx(1.5)
        assert result.reference_station_id == 123

    def test_without_optional_fields(self):
        sentence = _with_checksum(
            "GPGGA,053204.02,3723.1018333,N,12205.3972723,W,1,00,1.0,39.662,M,-33.027,M"
        )
        result = decode_gga(sentence)
        assert result.valid is True
        assert result.age_of_differential is None
        assert result.reference_station_id is None

    def test_no_fix_sentence_has_no_location(self):
        result = decode_gga("$GNGGA,123519.00,,,,,0,00,,,,,,,*5B")
        assert result.valid is True
        assert result.location is None
        assert result.fix_quality == 0
        assert result.hdop is None
        assert result.altitude is None

    def test_empty_fix_quality_defaults_to_zero(self):
        result = decode_gga("$GNGGA,123519.00,,,,,,,,,,,,,*6B")
        assert result.valid is True
        assert result.fix_quality == 0

    def test_trailing_crlf(self):
        result = decode_gga(SAMPLE + "\r\n")
        assert result.valid is True
        assert result.raw == SAMPLE + "\r\n"

    def test_invalid_checksum_populates_nothing(self):
        sentence = SAMPLE[:-2] + "41"
        result = decode_gga(sentence)
        assert result == GGASentence(raw=sentence, valid=False)

    def test_malformed_coordinate_is_invalid(self):
        sentence = _with_checksum(
            "GPGGA,053204.02,37x3.1018333,N,12205.3972723,W,1,00,1.0,39.662,M,-33.027,M,0.0,"
        )
        assert decode_gga(sentence) == GGASentence(raw=sentence, valid=False)

    def test_malformed_time_is_invalid(self):
        sentence = _with_checksum(
            "GPGGA,5:32,3723.1018333,N,12205.3972723,W,1,00,1.0,39.662,M,-33.027,M,0.0,"
        )
        assert decode_gga(sentence).valid is False

    def test_too_few_fields_is_invalid(self):
        sentence = _with_checksum("GPGGA,053204.02,3723.1018333,N")
        assert decode_gga(sentence).valid is False

    def test_single_character_mutation_invalidates(self):
        star = SAMPLE.index("*")
        for index in range(1, star):
            replacement = "0" if SAMPLE[index] != "0" else "1"
            mutated = SAMPLE[:index] + replacement + SAMPLE[index + 1 :]
            assert decode(mutated).valid is False, mutated


def _sentence(**overrides) -> GGASentence:
    fields = dict(
        sentence_type="GPGGA",
        timestamp=datetime(2024, 3, 1, 5, 32, 4, 20_000, tzinfo=timezone.utc),
        location=Location(ecef=geodetic_to_ecef(SAMPLE_LATITUDE, SAMPLE_LONGITUDE)),
        fix_quality=1,
        satellites=0,
        hdop=1.0,
        altitude=39.662,
        altitude_unit="M",
        geoidal_separation=-33.027,
        geoidal_separation_unit="M",
    )
    fields.update(overrides)
    return GGASentence(**fields)


class TestEncodeGGA:
    def test_field_layout(self):
        text = encode_gga(_sentence())
        body = text[: text.index("*")]
        assert body.split(",") == [
            "$GPGGA",
            "053204.020",
            "3723.101833",
            "N",
            "12205.397272",
            "W",
            "1",
            "00",
            "1.000",
            "39.662",
            "M",
            "-33.027",
            "M",
        ]

    def test_checksum_is_fresh_uppercase_hex(self):
        text = encode_gga(_sentence())
        assert validate_checksum(text)
        checksum = text[text.index("*") + 1 :]
        assert len(checksum) == 2
        assert checksum == checksum.upper()

    def test_position_comes_from_ecef(self):
        location = Location(
            ecef=geodetic_to_ecef(-33.5, 151.25),
            point={"type": "Point", "coordinates": [1.0, 2.0]},
        )
        fields = encode_gga(_sentence(location=location)).split(",")
        assert fields[2:6] == ["3330.000000", "S", "15115.000000", "E"]

    def test_optional_trailing_fields(self):
        fields = encode_gga(
            _sentence(age_of_differential=1.0, reference_station_id=1)
        ).split("*")[0].split(",")
        assert fields[-2:] == ["1.000", "0001"]

    def test_station_without_age_keeps_age_slot(self):
        fields = encode_gga(_sentence(reference_station_id=17)).split("*")[0].split(",")
        assert fields[-2:] == ["", "0017"]

    def test_zero_age_omitted(self):
        fields = encode_gga(_sentence(age_of_differential=0.0)).split("*")[0].split(",")
        assert len(fields) == 13

    def test_missing_units_default_to_metres(self):
        fields = encode_gga(
            _sentence(altitude_unit=None, geoidal_separation_unit=None)
        ).split("*")[0].split(",")
        assert fields[10] == "M"
        assert fields[12] == "M"

    def test_time_converted_to_utc(self):
        local = datetime(2024, 3, 1, 7, 32, 4, tzinfo=timezone(timedelta(hours=2)))
        assert encode_gga(_sentence(timestamp=local)).split(",")[1] == "053204.000"

    def test_no_location_raises(self):
        with pytest.raises(ValueError):
            encode_gga(_sentence(location=None))


class TestRoundTrip:
    def test_decode_encode_is_stable(self):
        first = decode(SAMPLE)
        second = decode(encode(first))
        third = decode(encode(second))

        for result in (second, third):
            assert result.valid is True
            assert result.fix_quality == first.fix_quality
            assert result.satellites == first.satellites
            latitude, longitude = result.location.point["coordinates"]
            assert latitude == pytest.approx(SAMPLE_LATITUDE, abs=1e-6)
            assert longitude == pytest.approx(SAMPLE_LONGITUDE, abs=1e-6)

    def test_bare_type_round_trip(self):
        sentence = decode(SAMPLE)
        sentence.sentence_type = "GGA"
        text = encode(sentence)
        assert text.startswith("$GGA,")
        assert decode(text).valid is True
