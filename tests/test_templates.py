# =============================================================================
# tests/test_templates.py - Template Renderer Tests
# =============================================================================
# Tests for:
# - Globals and filters are usable in templates
# - The renderer locks on first render; later changes raise ConfigurationFailure
# - Lookup order (inline before directories) and missing templates
# - Autoescaping for .html templates
# =============================================================================

import pytest
from jinja2 import UndefinedError

from core.chain import InterceptionChain
from core.failures import ConfigurationFailure, TemplateNotFoundFailure
from core.models.http import Request
from core.stages import TemplateStage
from lib.templates import TemplateRenderer


class TestLifecycle:
    """Tests for the two-phase globals lifecycle."""

    def test_global_available_in_templates(self, renderer):
        assert renderer.render("page.html", title="Home") == "<h1>Test Site: Home</h1>"

    def test_unlocked_until_first_render(self, renderer):
        assert not renderer.locked

        renderer.add_global("year", 2026)
        renderer.render("page.html", title="x")

        assert renderer.locked

    def test_add_global_after_render_fails(self, renderer):
        """Test that globals are frozen after the first render."""
        renderer.render("page.html", title="x")

        with pytest.raises(ConfigurationFailure) as exc_info:
            renderer.add_global("late", "value")

        assert exc_info.value.details == {"kind": "global", "name": "late"}
        assert "late" not in renderer.globals

    def test_add_filter_after_render_fails(self, renderer):
        renderer.render("page.html", title="x")

        with pytest.raises(ConfigurationFailure):
            renderer.add_filter("shout", str.upper)

    def test_add_template_after_render_fails(self, renderer):
        renderer.render("page.html", title="x")

        with pytest.raises(ConfigurationFailure):
            renderer.add_template("late.html", "late")

    def test_failed_render_still_locks(self, renderer):
        with pytest.raises(TemplateNotFoundFailure):
            renderer.render("missing.html")

        assert renderer.locked

    def test_globals_view_is_read_only(self, renderer):
        with pytest.raises(TypeError):
            renderer.globals["site_name"] = "changed"


class TestRendering:
    """Tests for template lookup and rendering."""

    def test_filter(self):
        renderer = TemplateRenderer(templates={"t.txt": "{{ name|shout }}"})
        renderer.add_filter("shout", str.upper)

        assert renderer.render("t.txt", name="ada") == "ADA"

    def test_directory_lookup(self, tmp_path):
        (tmp_path / "about.html").write_text("<p>About {{ who }}</p>", encoding="utf-8")
        renderer = TemplateRenderer(directories=[tmp_path])

        assert renderer.exists("about.html")
        assert renderer.render("about.html", who="us") == "<p>About us</p>"

    def test_inline_templates_win_over_directories(self, tmp_path):
        (tmp_path / "page.html").write_text("from disk", encoding="utf-8")
        renderer = TemplateRenderer(directories=[tmp_path], templates={"page.html": "inline"})

        assert renderer.render("page.html") == "inline"

    def test_missing_template(self, renderer):
        assert not renderer.exists("nope.html")

        with pytest.raises(TemplateNotFoundFailure) as exc_info:
            renderer.render("nope.html")

        assert exc_info.value.name == "nope.html"

    def test_html_is_autoescaped(self, renderer):
        html = renderer.render("page.html", title="<script>")

        assert "&lt;script&gt;" in html

    def test_strict_mode(self):
        renderer = TemplateRenderer(templates={"t.txt": "{{ missing }}"}, strict=True)

        with pytest.raises(UndefinedError):
            renderer.render("t.txt")

    def test_render_response(self, renderer):
        response = renderer.render_response("page.html", status_code=201, title="Made")

        assert response.status_code == 201
        assert response.media_type == "text/html"
        assert response.body == "<h1>Test Site: Made</h1>"


class TestTemplateStage:
    """Tests for TemplateStage."""

    def test_renderer_attached_to_request(self, renderer):
        def handler(request):
            return request.attribute("view").render_response("page.html", title="Staged")

        chain = InterceptionChain(handler, stages=[TemplateStage(renderer)])

        assert chain.handle(Request()).body == "<h1>Test Site: Staged</h1>"
