"""
Item descriptions from an external text generator.

The generator is any callable taking a prompt and returning text;
AnthropicTextGenerator is the one the CLI uses. Generator failures are
reported per item and never retried.
"""

# Standard Library
import dataclasses
import os
import typing

# PIP3 modules
import requests

# local repo modules
import kdp_book_builder as kbb
import kdp_book_builder.config


ContentItem = kbb.config.ContentItem

DescriptionGenerator = typing.Callable[[str], str]

API_URL = "https://api.anthropic.com/v1/messages"
API_VERSION = "2023-06-01"
API_KEY_VAR = "ANTHROPIC_API_KEY"
API_TIMEOUT = 30.0
DEFAULT_MODEL = "claude-3-5-haiku-20241022"
DEFAULT_MAX_TOKENS = 600


#============================================
def build_description_prompt(title: str) -> str:
	"""
	Build the prompt sent for one item.

	Args:
		title: Item title.

	Returns:
		Prompt text.
	"""
	return (
		"Write a short descriptive text, two or three paragraphs, for a printed "
		f"art book page about the work titled: {title.strip()}. "
		"Plain prose only, no headings or lists."
	)


#============================================
def fill_descriptions(
	items: list[ContentItem],
	generate: DescriptionGenerator,
	overwrite: bool = False,
) -> tuple[list[ContentItem], dict[int, str]]:
	"""
	Fill item descriptions using a text generator.

	Items that already have a description are kept unless overwrite is
	set, and items without a title are skipped.

	Args:
		items: Content items.
		generate: Prompt to text callable.
		overwrite: Replace existing descriptions.

	Returns:
		Tuple of (updated items, failure message by item index).
	"""
	updated: list[ContentItem] = []
	failures: dict[int, str] = {}
	for index, item in enumerate(items):
		if not item.title.strip() or (item.description.strip() and not overwrite):
			updated.append(item)
			continue
		try:
			description = generate(build_description_prompt(item.title))
		except Exception as error:
			# one item's failure must not stop the others
			failures[index] = str(error) or type(error).__name__
			updated.append(item)
			continue
		updated.append(dataclasses.replace(item, description=(description or "").strip()))
	return updated, failures


class AnthropicTextGenerator:
	"""
	Text generator backed by the Anthropic messages API.

	Instances are callables matching DescriptionGenerator.
	"""

	def __init__(
		self,
		api_key: str | None = None,
		model: str = DEFAULT_MODEL,
		max_tokens: int = DEFAULT_MAX_TOKENS,
		timeout: float = API_TIMEOUT,
	):
		self.api_key = api_key or os.environ.get(API_KEY_VAR)
		if not self.api_key:
			raise ValueError(f"Anthropic API key is required, set {API_KEY_VAR}")
		self.model = model
		self.max_tokens = max_tokens
		self.timeout = timeout

	def __call__(self, prompt: str) -> str:
		response = requests.post(
			API_URL,
			headers={
				"x-api-key": self.api_key,
				"anthropic-version": API_VERSION,
				"content-type": "application/json",
			},
			json={
				"model": self.model,
				"max_tokens": self.max_tokens,
				"messages": [{"role": "user", "content": prompt}],
			},
			timeout=self.timeout,
		)
		if response.status_code != 200:
			raise RuntimeError(f"API request failed with status {response.status_code}: {response.text}")
		result = response.json()
		return "".join(
			block.get("text", "") for block in result.get("content", []) if block.get("type") == "text"
		)
