"""
Frontend configuration document (frontend/public/config.js).

The document declares a single object literal, e.g.

    const CONFIG = {
        NETWORK: { NAME: 'Localhost', CHAIN_ID: 31337, ... },
        CONTRACTS: { PRIVATE_VOTING: '0x...' },
        ...
    };

Fields are addressed by dotted path ('CONTRACTS.PRIVATE_VOTING'). Updating a
field splices the new literal into the exact source span of the old one, so
comments, whitespace, line endings and every other field stay byte-identical.
"""

import re
from pathlib import Path
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

from voting_deployment.constants import (
    CONFIG_OBJECT_NAME,
    CONTRACTS_GROUP,
    FRONTEND_CONFIG_FILEPATH,
    PRIVATE_VOTING_KEY,
)
from voting_deployment.utils import validate_address

QUOTES = "'\"`"
PUNCTUATION = "{}[]:,"

_WORD = re.compile(r"[A-Za-z0-9_$.+\-]+")


class _Token(NamedTuple):
    kind: str  # punct, string or word
    value: str
    start: int
    end: int


class ConfigField(NamedTuple):
    """A scalar value of the configuration object and where it sits in the source."""

    path: str
    value: str
    start: int
    end: int
    quote: Optional[str]  # None for numbers, booleans and identifiers


def _string_end(text: str, start: int) -> int:
    quote = text[start]
    position = start + 1
    while position < len(text):
        char = text[position]
        if char == "\\":
            position += 2
            continue
        if char == quote:
            return position + 1
        if char == "\n" and quote != "`":
            break
        position += 1
    raise ConfigDocument.Malformed(f"Unterminated string literal at offset {start}.")


def _tokenize(text: str, position: int) -> Iterator[_Token]:
    length = len(text)
    while position < length:
        char = text[position]
        if char.isspace():
            position += 1
        elif text.startswith("//", position):
            end = text.find("\n", position)
            position = length if end == -1 else end
        elif text.startswith("/*", position):
            end = text.find("*/", position + 2)
            if end == -1:
                raise ConfigDocument.Malformed(f"Unterminated comment at offset {position}.")
            position = end + 2
        elif char in QUOTES:
            end = _string_end(text, position)
            yield _Token("string", text[position + 1 : end - 1], position, end)
            position = end
        elif char in PUNCTUATION:
            yield _Token("punct", char, position, position + 1)
            position += 1
        else:
            match = _WORD.match(text, position)
            if not match:
                raise ConfigDocument.Malformed(
                    f"Unexpected character {char!r} at offset {position}."
                )
            yield _Token("word", match.group(), position, match.end())
            position = match.end()


class _ObjectLiteralParser:
    """Collects the scalar fields of one object literal, stopping at its closing brace."""

    def __init__(self, text: str, start: int):
        self._text = text
        self._tokens = _tokenize(text, start)
        self.fields: List[ConfigField] = list()

    def parse(self) -> List[ConfigField]:
        opening = self._next()
        if not self._is_punct(opening, "{"):
            raise ConfigDocument.Malformed(f"Expected '{{' at offset {opening.start}.")
        self._parse_object(path=())
        return self.fields

    def _next(self) -> _Token:
        try:
            return next(self._tokens)
        except StopIteration:
            raise ConfigDocument.Malformed("Unexpected end of the configuration object.")

    @staticmethod
    def _is_punct(token: _Token, char: str) -> bool:
        return token.kind == "punct" and token.value == char

    def _parse_object(self, path: Tuple[str, ...]) -> None:
        while True:
            token = self._next()
            if self._is_punct(token, "}"):
                return
            if self._is_punct(token, ","):
                continue
            if token.kind == "punct":
                raise ConfigDocument.Malformed(
                    f"Expected a key but found '{token.value}' at offset {token.start}."
                )
            colon = self._next()
            if not self._is_punct(colon, ":"):
                raise ConfigDocument.Malformed(
                    f"Expected ':' after '{token.value}' at offset {colon.start}."
                )
            self._parse_value(path + (token.value,), self._next())

    def _parse_array(self, path: Tuple[str, ...]) -> None:
        index = 0
        while True:
            token = self._next()
            if self._is_punct(token, "]"):
                return
            if self._is_punct(token, ","):
                continue
            self._parse_value(path + (str(index),), token)
            index += 1

    def _parse_value(self, path: Tuple[str, ...], token: _Token) -> None:
        if self._is_punct(token, "{"):
            self._parse_object(path)
        elif self._is_punct(token, "["):
            self._parse_array(path)
        elif token.kind in ("string", "word"):
            quote = self._text[token.start] if token.kind == "string" else None
            field = ConfigField(
                path=".".join(path),
                value=token.value,
                start=token.start,
                end=token.end,
                quote=quote,
            )
            self.fields.append(field)
        else:
            raise ConfigDocument.Malformed(
                f"Unexpected '{token.value}' at offset {token.start}."
            )


def _declaration_pattern(object_name: str):
    return re.compile(rf"\b(?:const|let|var)\s+{re.escape(object_name)}\s*=\s*(?=\{{)")


def _index_fields(text: str, object_name: str) -> Dict[str, List[ConfigField]]:
    match = _declaration_pattern(object_name).search(text)
    if not match:
        raise ConfigDocument.Malformed(f"No '{object_name}' object declaration found.")

    fields = dict()
    for field in _ObjectLiteralParser(text, match.end()).parse():
        fields.setdefault(field.path, []).append(field)
    return fields


class ConfigDocument:
    """The frontend configuration source file, indexed by field path."""

    class Malformed(ValueError):
        """Raised when the configuration object cannot be read"""

    class FieldNotFound(ValueError):
        """Raised when the configuration has no field at the requested path"""

    class AmbiguousField(ValueError):
        """Raised when a field path appears more than once"""

    def __init__(
        self,
        text: str,
        filepath: Optional[Path] = None,
        object_name: str = CONFIG_OBJECT_NAME,
    ):
        self.text = text
        self.filepath = filepath
        self.object_name = object_name
        self._fields = _index_fields(text, object_name)

    @classmethod
    def from_file(cls, filepath: Path, **kwargs) -> "ConfigDocument":
        # newline="" keeps line endings untouched
        with open(filepath, "r", encoding="utf-8", newline="") as file:
            text = file.read()
        return cls(text=text, filepath=Path(filepath), **kwargs)

    @property
    def paths(self) -> List[str]:
        return list(self._fields)

    def field(self, path: str) -> ConfigField:
        fields = self._fields.get(path)
        if not fields:
            raise self.FieldNotFound(f"No '{path}' field in {self.filepath or 'configuration'}.")
        if len(fields) > 1:
            raise self.AmbiguousField(
                f"Field '{path}' appears {len(fields)} times in {self.filepath or 'configuration'}."
            )
        return fields[0]

    def get(self, path: str) -> str:
        return self.field(path).value

    def with_value(self, path: str, value: str) -> "ConfigDocument":
        """Returns a copy of the document with the string field at path set to value."""
        field = self.field(path)
        if field.quote is None:
            raise self.Malformed(f"Field '{path}' is not a string literal.")
        if field.quote in value or "\\" in value or "\n" in value:
            raise ValueError(f"Cannot write {value!r} as a {field.quote}-quoted literal.")

        literal = f"{field.quote}{value}{field.quote}"
        text = self.text[: field.start] + literal + self.text[field.end :]
        return ConfigDocument(text=text, filepath=self.filepath, object_name=self.object_name)

    def write(self, filepath: Optional[Path] = None) -> Path:
        filepath = filepath or self.filepath
        if filepath is None:
            raise ValueError("No filepath to write the configuration to.")
        with open(filepath, "w", encoding="utf-8", newline="") as file:
            file.write(self.text)
        return filepath


def update_contract_address(
    address: Optional[str],
    filepath: Path = FRONTEND_CONFIG_FILEPATH,
    contract_key: str = PRIVATE_VOTING_KEY,
) -> bool:
    """
    Sets CONTRACTS.<contract_key> in the frontend configuration to the checksummed address.
    Returns True if the file was modified.
    """
    checksum_address = validate_address(address)
    document = ConfigDocument.from_file(filepath)
    updated = document.with_value(f"{CONTRACTS_GROUP}.{contract_key}", checksum_address)

    if updated.text == document.text:
        print(f"{contract_key} contract address is already {checksum_address}")
        return False

    updated.write()
    print(f"Updated {contract_key} contract address to: {checksum_address}")
    print(f"Config file updated at: {filepath}")
    return True
