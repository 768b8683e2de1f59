"""Tests for prompting adapters and the end-to-end workflow with fakes."""

from __future__ import annotations

import pytest

from bootcamp_dl.common.errors import MissingContentLengthError, NetworkError, ParseError
from bootcamp_dl.workflow.pipeline import EXIT_OK, SupportSoftwarePipeline
from bootcamp_dl.workflow.prompts import ConsolePrompter, OverridePrompter, ScriptedPrompter
from conftest import (
    CATALOG_URL,
    DIST_URL,
    PKG_URL,
    FakeHTTPClient,
    FakeResponse,
    bootcamp_product,
    build_catalog_bytes,
)


class _SilentProgress:
    def update(self, percent: str) -> None:
        pass

    def complete(self) -> None:
        pass


def _pipeline(tmp_path, settings, client, runner, prompter, platform="linux") -> SupportSoftwarePipeline:
    return SupportSoftwarePipeline(
        prompter=prompter,
        settings=settings,
        client=client,
        runner=runner,
        platform=platform,
        cwd=tmp_path,
        progress=_SilentProgress(),
    )


class TestConsolePrompter:
    def _prompter(self, *answers):
        replies = iter(answers)
        return ConsolePrompter(input_func=lambda _msg: next(replies))

    def test_model_default_on_empty_answer(self):
        assert self._prompter("").ask_model("iMac12,2") == "iMac12,2"

    def test_model_answer(self):
        assert self._prompter(" MacBookPro11,5 ").ask_model("iMac12,2") == "MacBookPro11,5"

    def test_eof_means_no_model(self):
        def raise_eof(_msg):
            raise EOFError

        assert ConsolePrompter(input_func=raise_eof).ask_model("iMac12,2") is None

    def test_confirm(self):
        assert self._prompter("y").confirm_manual_choice()
        assert self._prompter("YES").confirm_cleanup()
        assert not self._prompter("").confirm_cleanup()
        assert not self._prompter("n").confirm_manual_choice()

    def test_empty_key_is_none(self):
        assert self._prompter("").ask_key() is None


class TestOverridePrompter:
    def test_flags_win_over_fallback(self):
        fallback = ScriptedPrompter(model="iMac12,2", manual=False, key=None, cleanup=True)
        prompter = OverridePrompter(fallback, model="Macmini5,1", key="041", cleanup=False)
        assert prompter.ask_model("x") == "Macmini5,1"
        assert prompter.confirm_manual_choice()
        assert prompter.ask_key() == "041"
        assert prompter.confirm_cleanup() is False

    def test_falls_back_when_unset(self):
        fallback = ScriptedPrompter(model="iMac12,2", manual=True, key="K", cleanup=True)
        prompter = OverridePrompter(fallback)
        assert prompter.ask_model("x") == "iMac12,2"
        assert prompter.confirm_manual_choice()
        assert prompter.ask_key() == "K"
        assert prompter.confirm_cleanup()

    def test_manual_flag_without_key_asks_fallback_for_key(self):
        fallback = ScriptedPrompter(model="iMac12,2", manual=False, key="OLD")
        prompter = OverridePrompter(fallback, manual=True)
        assert prompter.confirm_manual_choice()
        assert prompter.ask_key() == "OLD"


class _RecordingClient(FakeHTTPClient):
    def __init__(self, settings=None):
        super().__init__()
        self.closed = False

    def close(self):
        self.closed = True


class TestClientOwnership:
    def test_created_client_is_closed_on_exit(self, tmp_path, settings, monkeypatch):
        monkeypatch.setattr("bootcamp_dl.workflow.pipeline.HTTPClient", _RecordingClient)
        with SupportSoftwarePipeline(prompter=ScriptedPrompter(model=None), settings=settings, cwd=tmp_path) as p:
            p.run()
        assert isinstance(p.client, _RecordingClient)
        assert p.client.closed

    def test_injected_client_is_left_open(self, tmp_path, settings):
        client = _RecordingClient()
        with SupportSoftwarePipeline(
            prompter=ScriptedPrompter(model=None), settings=settings, client=client, cwd=tmp_path
        ):
            pass
        assert not client.closed


class TestSupportSoftwarePipeline:
    def test_no_model_exits_nonzero(self, tmp_path, settings, fake_client, runner):
        result = _pipeline(tmp_path, settings, fake_client, runner, ScriptedPrompter(model=None)).run()
        assert result.exit_code != 0
        assert fake_client.requests == []

    def test_list_only_does_not_download(self, tmp_path, settings, fake_client, runner):
        result = _pipeline(tmp_path, settings, fake_client, runner, ScriptedPrompter(model="iMac12,2")).run(
            list_only=True
        )
        assert result.exit_code == EXIT_OK
        assert [c.key for c in result.candidates] == ["84PKG"]
        assert PKG_URL not in fake_client.requests

    def test_manual_key_selects_older_product(self, tmp_path, settings, runner):
        catalog = build_catalog_bytes({
            "OLD": bootcamp_product(post_date="2015-01-01", pkg_url="https://x/old.pkg"),
            "NEW": bootcamp_product(post_date="2021-01-01", pkg_url="https://x/new.pkg"),
        })
        client = FakeHTTPClient({
            CATALOG_URL: FakeResponse(catalog),
            DIST_URL: FakeResponse(b"iMac12,2"),
            "https://x/old.pkg": FakeResponse(b"old"),
            "https://x/new.pkg": FakeResponse(b"new"),
        })
        prompter = ScriptedPrompter(model="iMac12,2", manual=True, key="OLD")

        result = _pipeline(tmp_path, settings, client, runner, prompter).run()

        assert result.chosen.key == "OLD"
        assert (tmp_path / "BC-OLD" / "BootCampSupport.pkg").read_bytes() == b"old"

    def test_invalid_key_falls_back_to_latest(self, tmp_path, settings, runner):
        catalog = build_catalog_bytes({
            "OLD": bootcamp_product(post_date="2015-01-01", pkg_url="https://x/old.pkg"),
            "NEW": bootcamp_product(post_date="2021-01-01", pkg_url="https://x/new.pkg"),
        })
        client = FakeHTTPClient({
            CATALOG_URL: FakeResponse(catalog),
            DIST_URL: FakeResponse(b"iMac12,2"),
            "https://x/new.pkg": FakeResponse(b"new"),
        })
        prompter = ScriptedPrompter(model="iMac12,2", manual=True, key="MISSING")

        result = _pipeline(tmp_path, settings, client, runner, prompter).run()

        assert result.exit_code == EXIT_OK
        assert result.chosen.key == "NEW"

    def test_product_without_package_is_unresolved(self, tmp_path, settings, runner):
        product = bootcamp_product()
        product["Packages"] = []
        client = FakeHTTPClient({
            CATALOG_URL: FakeResponse(build_catalog_bytes({"84PKG": product})),
            DIST_URL: FakeResponse(b"iMac12,2"),
        })
        result = _pipeline(tmp_path, settings, client, runner, ScriptedPrompter(model="iMac12,2")).run()
        assert result.exit_code != 0
        assert not (tmp_path / "BC-84PKG").exists()

    def test_catalog_failure_is_fatal(self, tmp_path, settings, runner):
        client = FakeHTTPClient({CATALOG_URL: NetworkError("down", url=CATALOG_URL)})
        with pytest.raises(NetworkError):
            _pipeline(tmp_path, settings, client, runner, ScriptedPrompter(model="iMac12,2")).run()

    def test_malformed_catalog_is_fatal(self, tmp_path, settings, runner):
        client = FakeHTTPClient({CATALOG_URL: FakeResponse(b"not a plist")})
        with pytest.raises(ParseError):
            _pipeline(tmp_path, settings, client, runner, ScriptedPrompter(model="iMac12,2")).run()

    def test_missing_content_length_is_fatal(self, tmp_path, settings, fake_client, runner):
        fake_client.routes[PKG_URL] = FakeResponse(b"data", headers={})
        with pytest.raises(MissingContentLengthError):
            _pipeline(tmp_path, settings, fake_client, runner, ScriptedPrompter(model="iMac12,2")).run()

    def test_rerun_skips_existing_download(self, tmp_path, settings, fake_client, runner):
        prompter = ScriptedPrompter(model="iMac12,2")
        _pipeline(tmp_path, settings, fake_client, runner, prompter).run()
        second = _pipeline(tmp_path, settings, fake_client, runner, prompter).run()
        assert second.download.skipped
        assert fake_client.requests.count(PKG_URL) == 1

    def test_extraction_runs_on_macos(self, tmp_path, settings, fake_client, runner):
        prompter = ScriptedPrompter(model="iMac12,2", cleanup=True)
        result = _pipeline(tmp_path, settings, fake_client, runner, prompter, platform="darwin").run()
        assert result.exit_code == EXIT_OK
        assert runner.commands() == ["pkgutil", "tar"]
        assert not result.extraction.skipped_platform
        # Fake tools produce nothing, so there is no DMG and no cleanup
        assert not result.extraction.success
        assert (tmp_path / "BC-84PKG").exists()
