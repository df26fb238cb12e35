import pathlib

import pytest
import reportlab.pdfgen.canvas

import kdp_book_builder as kbb
import kdp_book_builder.config
import kdp_book_builder.describe
import kdp_book_builder.extract


ContentItem = kbb.config.ContentItem


#============================================
def _item(title: str, description: str = "") -> ContentItem:
	return ContentItem(image_pixel_width=10, image_pixel_height=10, title=title, description=description)


#============================================
def test_fill_descriptions_reports_failures() -> None:
	"""
	A failing item keeps its text and the others are still filled.
	"""
	prompts: list[str] = []

	def generate(prompt: str) -> str:
		prompts.append(prompt)
		if "Broken" in prompt:
			raise RuntimeError("quota exceeded")
		return "  Generated text.  "

	items = [_item("Duomo"), _item(""), _item("Broken"), _item("Kept", "Existing.")]
	updated, failures = kbb.describe.fill_descriptions(items, generate)
	assert [item.description for item in updated] == ["Generated text.", "", "", "Existing."]
	assert failures == {2: "quota exceeded"}
	assert len(prompts) == 2
	assert "Duomo" in prompts[0]


#============================================
def test_fill_descriptions_overwrite() -> None:
	updated, failures = kbb.describe.fill_descriptions(
		[_item("Kept", "Existing.")],
		lambda prompt: "New.",
		overwrite=True,
	)
	assert updated[0].description == "New."
	assert failures == {}


#============================================
def test_extract_pdf_pages(tmp_path: pathlib.Path) -> None:
	path = tmp_path / "source.pdf"
	pdf = reportlab.pdfgen.canvas.Canvas(str(path))
	pdf.drawString(72, 720, "First page text")
	pdf.showPage()
	pdf.showPage()
	pdf.drawString(72, 720, "Third page text")
	pdf.showPage()
	pdf.save()
	pages = kbb.extract.extract_pdf_pages(path)
	assert len(pages) == 3
	assert "First page text" in pages[0]
	assert pages[1].strip() == ""
	body = kbb.extract.join_units(pages)
	assert body.split("\n\n") == ["First page text", "Third page text"]


#============================================
def test_join_units_normalizes() -> None:
	assert kbb.extract.join_units(["a\r\nb ", "", "  c"]) == "a\nb\n\nc"


#============================================
def test_anthropic_generator_request(monkeypatch: pytest.MonkeyPatch) -> None:
	calls: list[dict] = []

	class FakeResponse:
		status_code = 200
		text = ""

		def json(self) -> dict:
			return {"content": [{"type": "text", "text": "Generated."}]}

	def fake_post(url, headers=None, json=None, timeout=None):
		calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
		return FakeResponse()

	monkeypatch.setattr(kbb.describe.requests, "post", fake_post)
	generate = kbb.describe.AnthropicTextGenerator(api_key="test-key")
	assert generate("Describe it") == "Generated."
	assert calls[0]["url"] == kbb.describe.API_URL
	assert calls[0]["headers"]["x-api-key"] == "test-key"
	assert calls[0]["json"]["messages"] == [{"role": "user", "content": "Describe it"}]
	assert calls[0]["timeout"] == kbb.describe.API_TIMEOUT


#============================================
def test_anthropic_generator_requires_key(monkeypatch: pytest.MonkeyPatch) -> None:
	monkeypatch.delenv(kbb.describe.API_KEY_VAR, raising=False)
	with pytest.raises(ValueError):
		kbb.describe.AnthropicTextGenerator()
