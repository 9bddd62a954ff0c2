from __future__ import annotations

import pytest

from sitereplica.services.url_safety import classify, normalize_url


@pytest.mark.parametrize(
    "host",
    [
        "10.0.0.1",
        "10.255.255.255",
        "172.16.0.1",
        "172.31.255.254",
        "192.168.1.1",
        "127.0.0.1",
        "127.8.9.10",
        "169.254.0.1",
        "169.254.169.254",
        "100.64.0.1",
        "100.127.255.255",
        "198.18.0.1",
        "198.19.255.255",
        "0.1.2.3",
    ],
)
def test_private_ipv4_ranges_are_rejected(host: str) -> None:
    verdict = classify(f"http://{host}/path")

    assert verdict.allowed is False
    assert verdict.reason


@pytest.mark.parametrize("host", ["172.32.0.1", "100.128.0.1", "198.20.0.1", "8.8.8.8", "93.184.216.34"])
def test_public_ipv4_addresses_are_allowed(host: str) -> None:
    assert classify(f"https://{host}/").allowed is True


@pytest.mark.parametrize(
    "url",
    [
        "http://localhost/",
        "http://LOCALHOST:8080/admin",
        "http://localhost./",
        "http://127.0.0.1/",
        "http://[::1]/",
        "http://0.0.0.0/",
    ],
)
def test_loopback_hostnames_are_rejected(url: str) -> None:
    assert classify(url).allowed is False


@pytest.mark.parametrize(
    "url",
    ["ftp://example.com/file", "file:///etc/passwd", "javascript:alert(1)", "gopher://example.com/"],
)
def test_non_http_schemes_are_rejected(url: str) -> None:
    verdict = classify(url)

    assert verdict.allowed is False


def test_unparsable_url_is_rejected_as_invalid_format() -> None:
    verdict = classify("http://[::1")

    assert verdict.allowed is False
    assert verdict.reason == "Invalid URL format"


@pytest.mark.parametrize(
    "host",
    ["2130706433", "0177.0.0.1", "127.1", "0x7f.0.0.1", "0x7F000001", "012.1.2.3", "0xa9fea9fe", "169.254.43518"],
)
def test_shorthand_ipv4_forms_are_rejected(host: str) -> None:
    verdict = classify(f"http://{host}/")

    assert verdict.allowed is False
    assert verdict.reason == "Private or internal IP addresses are not allowed"


@pytest.mark.parametrize("host", ["134744072", "8.8.2056", "0x08.0x08.0x08.0x08", "1.2.3"])
def test_shorthand_public_ipv4_forms_are_allowed(host: str) -> None:
    assert classify(f"http://{host}/").allowed is True


def test_octet_above_255_is_rejected() -> None:
    verdict = classify("http://256.1.1.1/")

    assert verdict.allowed is False
    assert verdict.reason == "Invalid IP address"


@pytest.mark.parametrize(
    "host",
    [
        "metadata.google.internal",
        "metadata.goog",
        "instance-data.ec2.example",
        "metadata.azure.com",
    ],
)
def test_cloud_metadata_hostnames_are_rejected(host: str) -> None:
    assert classify(f"http://{host}/latest").allowed is False


@pytest.mark.parametrize("host", ["printer.local", "db.internal", "app.localhost"])
def test_internal_suffixes_are_rejected(host: str) -> None:
    assert classify(f"https://{host}/").allowed is False


@pytest.mark.parametrize(
    "host",
    ["[fe80::1]", "[fc00::1]", "[fd12:3456::1]", "[::]", "[::ffff:10.0.0.1]", "[fd00:ec2::254]"],
)
def test_private_ipv6_literals_are_rejected(host: str) -> None:
    assert classify(f"http://{host}/").allowed is False


def test_public_ipv6_literal_is_allowed() -> None:
    assert classify("http://[2606:4700:4700::1111]/").allowed is True


def test_scheme_is_added_to_bare_hostname() -> None:
    url = normalize_url("  example.com ")

    assert url == "https://example.com"
    assert classify(url).allowed is True


def test_existing_scheme_is_preserved() -> None:
    assert normalize_url("http://example.com/a") == "http://example.com/a"
    assert normalize_url("") == ""
