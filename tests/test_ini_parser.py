"""INI parser tests."""
from __future__ import annotations

from pcactl.ini import parse_text


def test_parses_basic_inifile() -> None:
    """Top-level lines and explicit sections land in the right buckets."""
    parsed = parse_text(
        """
    server = certname

    [master]
      dns_alt_names=puppet,foo
      cadir        = /var/www/super-secure

    [main]
    environment = prod_1_env
    """
    )

    assert {"main", "master"} <= parsed.keys()
    assert parsed["main"] == {"server": "certname", "environment": "prod_1_env"}
    assert parsed["master"] == {
        "dns_alt_names": "puppet,foo",
        "cadir": "/var/www/super-secure",
    }


def test_main_header_and_top_level_share_bucket_later_wins() -> None:
    """Unlabelled settings and ``[main]`` merge, later declarations winning."""
    parsed = parse_text(
        "certname = early\n"
        "server = top\n"
        "[main]\n"
        "certname = late\n"
    )

    assert parsed["main"] == {"certname": "late", "server": "top"}


def test_discards_file_metadata_and_garbage_lines() -> None:
    """Trailing ``{...}`` metadata is stripped and free text is dropped."""
    parsed = parse_text(
        """
    [ca]
      cadir = /var/www/ca {user = service}

    [master]
      coming_at = Innsmouth
      mantra = Pu̴t t̢h͞é ̢ćlas̸s̡e̸s̢ in arrays

    Now ̸to m̡et̴apr̷og҉ram a si͠mpl͞e ḑsl
    """
    )

    assert parsed["ca"] == {"cadir": "/var/www/ca"}
    assert parsed["master"]["coming_at"] == "Innsmouth"
    assert set(parsed["master"]) == {"coming_at", "mantra"}


def test_garbage_does_not_disturb_previous_keys() -> None:
    """A malformed line between settings leaves earlier keys untouched."""
    parsed = parse_text(
        "[main]\n"
        "ssldir = /srv/ssl\n"
        "this is not a setting\n"
        "[unterminated\n"
        "vardir = /srv/var\n"
    )

    assert parsed["main"] == {"ssldir": "/srv/ssl", "vardir": "/srv/var"}


def test_comments_are_ignored_and_keys_lowercased() -> None:
    """Comment lines are skipped and keys are case-normalised."""
    parsed = parse_text(
        "# ssldir = /commented/out\n"
        "[agent]\n"
        "  # another comment\n"
        "CertName = Agent.Example.com\n"
    )

    assert parsed["main"] == {}
    assert parsed["agent"] == {"certname": "Agent.Example.com"}


def test_section_headers_tolerate_whitespace_and_reopen() -> None:
    """Whitespace inside brackets is ignored and repeated headers merge."""
    parsed = parse_text(
        "[ master ]\n"
        "ca_ttl = 1y\n"
        "[main]\n"
        "server = puppet.example.com\n"
        "[master]\n"
        "ca_ttl = 2y\n"
        "ca_port = 8141\n"
    )

    assert parsed["master"] == {"ca_ttl": "2y", "ca_port": "8141"}


def test_empty_text_yields_empty_main_bucket() -> None:
    """Parsing nothing still produces the implicit main section."""
    assert parse_text("") == {"main": {}}


def test_section_header_with_trailing_comment() -> None:
    """A comment after a header still switches the current section."""
    parsed = parse_text(
        "ssldir = /main/ssl\n"
        "[master] # CA settings\n"
        "ssldir = /srv/ssl\n"
        "[agent]#agent only\n"
        "ssldir = /agent/ssl\n"
    )

    assert parsed["main"] == {"ssldir": "/main/ssl"}
    assert parsed["master"] == {"ssldir": "/srv/ssl"}
    assert parsed["agent"] == {"ssldir": "/agent/ssl"}
