"""
Draft persistence: JSON shape, local files and a REST key-value store.
"""

# Standard Library
import dataclasses
import json
import os
import pathlib

# PIP3 modules
import requests

# local repo modules
import kdp_book_builder as kbb
import kdp_book_builder.config


BookSettings = kbb.config.BookSettings
ContentItem = kbb.config.ContentItem

DRAFT_VERSION = 1
KV_TIMEOUT = 30.0
KV_URL_VARS = ("UPSTASH_REDIS_REST_URL", "KV_REST_API_URL")
KV_TOKEN_VARS = ("UPSTASH_REDIS_REST_TOKEN", "KV_REST_API_TOKEN")


class DraftFormatError(ValueError):
	"""
	Draft JSON that cannot be read back.
	"""


class DraftStoreError(RuntimeError):
	"""
	Key-value store failure, carrying the store's own message.
	"""


class DraftNotFoundError(DraftStoreError):
	"""
	No draft stored under the requested id.
	"""


#============================================
def build_draft(settings: BookSettings, items: list[ContentItem]) -> dict:
	"""
	Build the JSON-ready draft payload.

	Args:
		settings: Book settings.
		items: Content items.

	Returns:
		Dictionary with version, book and items keys.
	"""
	return {
		"version": DRAFT_VERSION,
		"book": dataclasses.asdict(settings),
		"items": [dataclasses.asdict(item) for item in items],
	}


#============================================
def _known_fields(cls: type, data: dict, where: str) -> dict:
	if not isinstance(data, dict):
		raise DraftFormatError(f"{where} must be an object, got {type(data).__name__}")
	names = {field.name for field in dataclasses.fields(cls)}
	return {key: value for key, value in data.items() if key in names}


#============================================
def parse_draft(payload: dict) -> tuple[BookSettings, list[ContentItem]]:
	"""
	Read a draft payload back into value types.

	Unknown keys are ignored and missing keys take their defaults.

	Args:
		payload: Draft dictionary.

	Returns:
		Tuple of (settings, items).
	"""
	if not isinstance(payload, dict):
		raise DraftFormatError("Draft must be a JSON object")
	version = payload.get("version")
	if not isinstance(version, int) or isinstance(version, bool):
		raise DraftFormatError(f"Draft version must be an integer, got {version!r}")
	if version > DRAFT_VERSION:
		raise DraftFormatError(f"Draft version {version} is newer than supported version {DRAFT_VERSION}")
	settings = BookSettings(**_known_fields(BookSettings, payload.get("book", {}), "book"))
	raw_items = payload.get("items", [])
	if not isinstance(raw_items, list):
		raise DraftFormatError("items must be a list")
	items = [
		ContentItem(**_known_fields(ContentItem, raw, f"items[{index}]"))
		for index, raw in enumerate(raw_items)
	]
	return settings, items


#============================================
def save_draft_file(path: pathlib.Path, settings: BookSettings, items: list[ContentItem]) -> None:
	"""
	Write a draft to a local JSON file.

	Args:
		path: Output path.
		settings: Book settings.
		items: Content items.
	"""
	text = json.dumps(build_draft(settings, items), indent=2, sort_keys=True)
	pathlib.Path(path).write_text(text, encoding="utf-8")


#============================================
def load_draft_file(path: pathlib.Path) -> tuple[BookSettings, list[ContentItem]]:
	"""
	Read a draft from a local JSON file.

	Args:
		path: Draft path.

	Returns:
		Tuple of (settings, items).
	"""
	text = pathlib.Path(path).read_text(encoding="utf-8")
	try:
		payload = json.loads(text)
	except json.JSONDecodeError as error:
		raise DraftFormatError(f"{path}: invalid JSON ({error})") from error
	return parse_draft(payload)


#============================================
def _first_env(names: tuple[str, ...]) -> str | None:
	for name in names:
		value = os.environ.get(name)
		if value:
			return value
	return None


class KvDraftStore:
	"""
	Drafts in a Redis-compatible REST store (Upstash / Vercel KV).

	Commands are posted as JSON arrays such as ["SET", id, value].
	"""

	def __init__(self, url: str | None = None, token: str | None = None, timeout: float = KV_TIMEOUT):
		self.url = url or _first_env(KV_URL_VARS)
		self.token = token or _first_env(KV_TOKEN_VARS)
		self.timeout = timeout
		if not self.url or not self.token:
			raise DraftStoreError("Missing KV/Upstash env vars")

	def _command(self, *args: str):
		response = requests.post(
			self.url,
			headers={
				"Authorization": f"Bearer {self.token}",
				"Content-Type": "application/json",
			},
			json=list(args),
			timeout=self.timeout,
		)
		try:
			out = response.json()
		except ValueError:
			out = {}
		if not isinstance(out, dict):
			out = {}
		if not response.ok:
			message = out.get("error") if isinstance(out, dict) else None
			raise DraftStoreError(message or f"KV {args[0]} failed with status {response.status_code}")
		return out.get("result")

	def save(self, draft_id: str, payload: dict) -> None:
		if not draft_id or payload is None:
			raise DraftStoreError("Missing id or payload")
		self._command("SET", draft_id, json.dumps(payload))

	def load(self, draft_id: str) -> dict:
		if not draft_id:
			raise DraftStoreError("Missing id")
		result = self._command("GET", draft_id)
		if result is None:
			raise DraftNotFoundError(f"Draft {draft_id!r} not found")
		return json.loads(result)
