"""Tests for recent_track.commands — verb classification and candidate extraction."""

from __future__ import annotations

import pytest

from recent_track.commands import Verb, classify, expand_token, parse_command_line

HOME = "/home/alice"
CWD = "/work/project"


def parse(line: str, **kwargs):
    return parse_command_line(line, home=HOME, cwd=CWD, **kwargs)


# ---------------------------------------------------------------------------
# Tests — classification
# ---------------------------------------------------------------------------


class TestClassify:
    @pytest.mark.parametrize(
        "name, verb",
        [
            ("cd", Verb.CHANGE_DIRECTORY),
            ("cp", Verb.COPY),
            ("mv", Verb.MOVE),
            ("scp", Verb.REMOTE_COPY),
            ("ssh", Verb.REMOTE_LOGIN),
            ("rm", Verb.REMOVE_FILE),
            ("rmdir", Verb.REMOVE_DIRECTORY),
            ("vim", Verb.OTHER),
            ("CP", Verb.OTHER),
        ],
    )
    def test_names(self, name: str, verb: Verb):
        assert classify(name) is verb

    def test_sudo_is_skipped(self):
        parsed = parse("sudo cp a b")
        assert parsed.verb is Verb.COPY
        assert parsed.candidates == [f"{CWD}/a", f"{CWD}/b"]

    def test_only_one_sudo_skipped(self):
        parsed = parse("sudo sudo cp a")
        assert parsed.verb is Verb.OTHER
        assert parsed.candidates == [f"{CWD}/cp", f"{CWD}/a"]

    def test_custom_elevation_prefix(self):
        parsed = parse("doas rm x", elevation_prefixes=("doas",))
        assert parsed.verb is Verb.REMOVE_FILE
        assert parsed.candidates == [f"{CWD}/x"]

    def test_bare_sudo(self):
        parsed = parse("sudo")
        assert parsed.verb is Verb.OTHER
        assert parsed.candidates == []

    def test_command_name_excluded(self):
        assert parse("vim notes.txt").candidates == [f"{CWD}/notes.txt"]

    @pytest.mark.parametrize(
        "line, first",
        [
            ("./run.sh x", f"{CWD}/./run.sh"),
            ("../bin/tool x", f"{CWD}/../bin/tool"),
            ("/usr/bin/env x", "/usr/bin/env"),
            ("~/bin/tool x", f"{HOME}/bin/tool"),
        ],
    )
    def test_path_invocation_included(self, line: str, first: str):
        parsed = parse(line)
        assert parsed.candidates == [first, f"{CWD}/x"]


# ---------------------------------------------------------------------------
# Tests — token expansion
# ---------------------------------------------------------------------------


class TestExpandToken:
    def test_home(self):
        assert expand_token("~/notes.txt", Verb.OTHER, home=HOME, cwd=CWD) == f"{HOME}/notes.txt"

    def test_absolute(self):
        assert expand_token("/etc/hosts", Verb.OTHER, home=HOME, cwd=CWD) == "/etc/hosts"

    def test_relative(self):
        assert expand_token("src/main.py", Verb.OTHER, home=HOME, cwd=CWD) == f"{CWD}/src/main.py"

    def test_remote_spec_verbatim(self):
        assert expand_token("bob@host:/srv", Verb.REMOTE_COPY, home=HOME, cwd=CWD) == "bob@host:/srv"
        assert expand_token("scp://host/x", Verb.COPY, home=HOME, cwd=CWD) == "scp://host/x"

    def test_login_target_verbatim(self):
        assert expand_token("build-box", Verb.REMOTE_LOGIN, home=HOME, cwd=CWD) == "build-box"


# ---------------------------------------------------------------------------
# Tests — options and ignored arguments
# ---------------------------------------------------------------------------


class TestOptions:
    def test_flags_dropped(self):
        parsed = parse("ls -la --color=auto src")
        assert parsed.candidates == [f"{CWD}/src"]

    def test_dev_null_dropped(self):
        parsed = parse("cat /dev/null log.txt")
        assert parsed.candidates == [f"{CWD}/log.txt"]

    def test_dev_prefix_configurable(self):
        parsed = parse("dd /dev/zero out.img", ignored_prefixes=("/dev/",))
        assert parsed.candidates == [f"{CWD}/out.img"]

    @pytest.mark.parametrize(
        "line",
        [
            "cp -t /x a b",
            "cp --target-directory=/x a b",
            "mv a --target-directory /x b",
            "sudo mv a b -t /x",
        ],
    )
    def test_target_directory_option_aborts(self, line: str):
        parsed = parse(line)
        assert parsed.aborted is True
        assert parsed.candidates == []

    def test_target_directory_option_other_verbs(self):
        parsed = parse("tar -t archive.tar")
        assert parsed.aborted is False
        assert parsed.candidates == [f"{CWD}/archive.tar"]


# ---------------------------------------------------------------------------
# Tests — remote verbs
# ---------------------------------------------------------------------------


class TestRemote:
    def test_scp(self):
        parsed = parse("scp file.txt user@host:/remote/path")
        assert parsed.verb is Verb.REMOTE_COPY
        assert parsed.candidates == [f"{CWD}/file.txt", "user@host:/remote/path"]

    def test_ssh_single_target(self):
        parsed = parse("ssh -A deploy@web1")
        assert parsed.verb is Verb.REMOTE_LOGIN
        assert parsed.candidates == ["deploy@web1"]

    def test_ssh_multiple_arguments_skipped(self):
        assert parse("ssh web1 uptime").candidates == []
        assert parse("ssh -p 2222 web1").candidates == []
