"""Error-level parsing on top of the stack parser.

``ErrorParser`` accepts either raw stack text or an error object and
returns a ``ParsedError``: name, message, frames and, when enabled,
framework attribution. Results are cached by stack content so repeated
reports of the same error are parsed once.
"""

from __future__ import annotations

import dataclasses
import hashlib
import re
import time
import traceback
from threading import Lock
from typing import Any

from cachetools import LRUCache

from perflite.config.schema import PerfliteConfig
from perflite.core.frameworks import FrameworkTagger
from perflite.core.stack_parser import StackParser
from perflite.models.error import ParsedError
from perflite.utils.diagnostics import DiagnosticSink
from perflite.utils.metrics import MetricsRegistry, Timer, get_metrics
from perflite.utils.sanitize import SecretRedactor, get_redactor

DEFAULT_ERROR_NAME = "Error"


class ErrorParser:
    """Parses errors into structured form.

    Responsibilities:
    - Recover the error name and message from the stack header
    - Optionally redact secrets before anything is parsed or cached
    - Limit stack depth
    - Attribute frames to frameworks when tagging is enabled

    Example:
        parser = ErrorParser()
        parsed = parser.parse(stack_text, sanitize=True)
        print(parsed.name, len(parsed.frames))
    """

    HEADER_PATTERN = re.compile(
        r"^\s*(?:Uncaught\s+)?(?P<name>[A-Za-z_$][\w$.]*)(?::\s*(?P<message>.*))?$"
    )

    def __init__(
        self,
        config: PerfliteConfig | None = None,
        stack_parser: StackParser | None = None,
        tagger: FrameworkTagger | None = None,
        redactor: SecretRedactor | None = None,
        metrics: MetricsRegistry | None = None,
        sink: DiagnosticSink | None = None,
    ) -> None:
        """Initialize the ErrorParser.

        Args:
            config: Configuration (defaults apply when omitted)
            stack_parser: Stack parser to use
            tagger: Framework tagger (built from config when tagging is enabled)
            redactor: Secret redactor used when sanitizing
            metrics: Metrics registry (defaults to the global one)
            sink: Optional diagnostic sink for the stack parser
        """
        self._config = config or PerfliteConfig()
        self._parser = stack_parser or StackParser(sink=sink)
        if tagger is None and self._config.frameworks.enabled:
            tagger = FrameworkTagger(extra=self._config.frameworks.extra_tags)
        self._tagger = tagger
        self._redactor = redactor or get_redactor()
        self._metrics = metrics or get_metrics()

        cache_size = self._config.parser.cache_size
        self._cache: LRUCache[str, ParsedError] | None = (
            LRUCache(maxsize=cache_size) if cache_size > 0 else None
        )
        self._cache_lock = Lock()

    @property
    def config(self) -> PerfliteConfig:
        return self._config

    def parse(
        self,
        error: BaseException | str | Any,
        sanitize: bool | None = None,
        max_stack_depth: int | None = None,
    ) -> ParsedError:
        """Parse an error object or stack string.

        Args:
            error: Stack text, an exception, or an object with ``stack``,
                ``name`` and ``message`` attributes
            sanitize: Redact secrets first (defaults to config)
            max_stack_depth: Keep at most N frames (defaults to config)

        Returns:
            ParsedError with extracted information
        """
        if sanitize is None:
            sanitize = self._config.parser.sanitize
        if max_stack_depth is None:
            max_stack_depth = self._config.parser.max_stack_depth

        name, message, stack = self._describe(error)
        if sanitize:
            stack = self._redactor.redact(stack)
            message = self._redactor.redact(message)
            self._metrics.stacks_sanitized.inc()

        cache_key = self._cache_key(name, message, stack, max_stack_depth)
        cached = self._cache_get(cache_key)
        if cached is not None:
            self._metrics.cache_hits.inc()
            # Frames are shared; the timestamp records this parse request
            return dataclasses.replace(cached, timestamp=time.time())
        self._metrics.cache_misses.inc()

        with Timer(self._metrics.parse_duration):
            frames = tuple(self._parser.parse(stack, max_frames=max_stack_depth))
            annotated = tuple(self._tagger.annotate(frames)) if self._tagger else ()

        parsed = ParsedError(
            name=name,
            message=message,
            stack=stack,
            frames=frames,
            timestamp=time.time(),
            source="local",
            annotated_frames=annotated,
        )

        self._metrics.errors_parsed.inc()
        self._metrics.frames_extracted.inc(len(frames))
        tagged = sum(1 for item in annotated if item.is_framework)
        if tagged:
            self._metrics.frames_tagged.inc(tagged)

        self._cache_set(cache_key, parsed)
        return parsed

    def clear_cache(self) -> None:
        if self._cache is not None:
            with self._cache_lock:
                self._cache.clear()

    def _describe(self, error: BaseException | str | Any) -> tuple[str, str, str]:
        """Return (name, message, stack) for any supported error input."""
        if error is None:
            return DEFAULT_ERROR_NAME, "", ""

        if isinstance(error, str):
            name, message = self._extract_header(error)
            return name, message, error

        stack = getattr(error, "stack", None)

        if isinstance(error, BaseException):
            name = type(error).__name__
            message = str(error)
            if not isinstance(stack, str):
                stack = "".join(traceback.format_exception(error))
            return name, message, stack

        # Duck-typed JavaScript error objects (name/message/stack)
        name = getattr(error, "name", None) or DEFAULT_ERROR_NAME
        message = getattr(error, "message", None) or ""
        if not isinstance(stack, str):
            stack = ""
        return str(name), str(message), stack

    def _extract_header(self, stack: str) -> tuple[str, str]:
        """Extract name and message from the first line of a stack."""
        for line in stack.splitlines():
            if not line.strip():
                continue
            if self._parser.matcher.identify(line) is not None:
                break
            match = self.HEADER_PATTERN.match(line)
            if match is None:
                break
            name, message = match.group("name"), match.group("message")
            if message is not None or name.endswith("Error"):
                return name, (message or "").strip()
            break
        return DEFAULT_ERROR_NAME, ""

    def _cache_key(self, name: str, message: str, stack: str, depth: int | None) -> str:
        raw = "\0".join((name, message, str(depth), str(self._tagger is not None), stack))
        digest = hashlib.md5(raw.encode("utf-8", errors="surrogatepass"), usedforsecurity=False)
        return digest.hexdigest()

    def _cache_get(self, key: str) -> ParsedError | None:
        if self._cache is None:
            return None
        with self._cache_lock:
            return self._cache.get(key)

    def _cache_set(self, key: str, parsed: ParsedError) -> None:
        if self._cache is None:
            return
        with self._cache_lock:
            self._cache[key] = parsed
