"""Tests for the generative example."""


class TestGenerativeApp:
    """Verify block exports expand into new file exports."""

    def test_single_pass(self, example_app) -> None:
        assert example_app.passes == 1

    def test_pages_generated(self, example_app) -> None:
        assert example_app.generated == ["page_red", "page_green"]

    def test_files_written_under_output_dir(self, example_app, tmp_path) -> None:
        results = example_app.export(tmp_path)
        assert [r.path for r in results] == [tmp_path / "red.txt", tmp_path / "green.txt"]
        assert (tmp_path / "red.txt").read_text(encoding="utf-8") == "Swatch: red"
        assert (tmp_path / "green.txt").read_text(encoding="utf-8") == "Swatch: green"
