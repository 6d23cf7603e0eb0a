from __future__ import annotations

import pytest

from oasclient.generation import GenerationProfile


class TestGenerationProfile:
    @pytest.mark.parametrize(
        "version, pep604, typing_extensions",
        [
            pytest.param("3.9", False, True, id="py39"),
            pytest.param("3.10", True, True, id="py310"),
            pytest.param("3.11", True, True, id="py311"),
            pytest.param("3.12", True, False, id="py312"),
            pytest.param("3.14", True, False, id="py314"),
            pytest.param((3, 10), True, True, id="tuple"),
            pytest.param("4", True, False, id="major-only"),
        ],
    )
    def test_from_version(self, version: str | tuple[int, int], pep604: bool, typing_extensions: bool) -> None:
        profile = GenerationProfile.from_version(version)
        assert profile.use_future_annotations is True
        assert profile.use_pep604 is pep604
        assert profile.use_typing_extensions is typing_extensions

    @pytest.mark.parametrize("version", ["3.8", "2.7", (3, 6)])
    def test_rejects_old_versions(self, version: str | tuple[int, int]) -> None:
        with pytest.raises(ValueError, match="minimum is 3.9"):
            GenerationProfile.from_version(version)
