"""Framework attribution for stack frames.

An optional post-processing step: ``FrameworkTagger`` looks up each
frame's file name in a table of path fragments and labels frames that come
from well-known libraries. Parsing never consults the table.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from perflite.models.frame import AnnotatedFrame, StackFrame

FRAMEWORK_TAGS: Mapping[str, str] = MappingProxyType(
    {
        "node_modules/react/": "React",
        "node_modules/react-dom/": "React",
        "node_modules/scheduler/": "React",
        "node_modules/react-router/": "React Router",
        "node_modules/react-router-dom/": "React Router",
        "node_modules/vue/": "Vue",
        "node_modules/@vue/": "Vue",
        "node_modules/vue-router/": "Vue Router",
        "node_modules/@angular/": "Angular",
        "node_modules/zone.js/": "Angular",
        "node_modules/svelte/": "Svelte",
        "node_modules/next/": "Next.js",
        "node_modules/nuxt/": "Nuxt",
        "node_modules/redux/": "Redux",
        "node_modules/@reduxjs/": "Redux",
        "node_modules/jquery/": "jQuery",
        "node_modules/lodash/": "Lodash",
        "node_modules/webpack/": "webpack",
        "node_modules/tapable/": "webpack",
        "webpack/bootstrap": "webpack",
        "node:internal/": "Node.js",
        "internal/process/": "Node.js",
    }
)


class FrameworkTagger:
    """Attributes frames to frameworks by path fragment.

    The longest matching fragment wins, so ``node_modules/react-router/``
    beats any shorter fragment that also matches.

    Example:
        tagger = FrameworkTagger()
        tagger.tag(frame)  # "React" for /node_modules/react-dom/cjs/...
    """

    def __init__(
        self,
        tags: Mapping[str, str] | None = None,
        extra: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the tagger.

        Args:
            tags: Fragment-to-label table (defaults to FRAMEWORK_TAGS)
            extra: Additional entries layered over ``tags``
        """
        table = dict(tags if tags is not None else FRAMEWORK_TAGS)
        if extra:
            table.update(extra)
        self._entries = tuple(sorted(table.items(), key=lambda item: len(item[0]), reverse=True))

    @property
    def tags(self) -> Mapping[str, str]:
        return MappingProxyType(dict(self._entries))

    def tag(self, frame: StackFrame) -> str | None:
        """Return the framework label for ``frame``, or None."""
        path = frame.file_name.replace("\\", "/")
        for fragment, label in self._entries:
            if fragment in path:
                return label
        return None

    def annotate(self, frames: Iterable[StackFrame]) -> list[AnnotatedFrame]:
        """Pair each frame with its framework label, keeping order."""
        return [AnnotatedFrame(frame=frame, framework=self.tag(frame)) for frame in frames]
