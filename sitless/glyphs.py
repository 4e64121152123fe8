from __future__ import annotations

# Built-in timer glyphs, 24x24, drawn in currentColor so the icon pipeline
# can recolor them against the chosen background.
GLYPHS = {
    "timer": (
        '<svg viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" '
        'stroke-linecap="round" stroke-linejoin="round">'
        '<line x1="10" y1="2" x2="14" y2="2"/><line x1="12" y1="14" x2="15" y2="11"/>'
        '<circle cx="12" cy="14" r="8"/></svg>'
    ),
    "timer-fill": (
        '<svg viewBox="0 0 24 24" fill="currentColor">'
        '<rect x="9" y="1" width="6" height="2" rx="1"/>'
        '<path d="M12 5a9 9 0 1 0 0 18a9 9 0 0 0 0-18zm1 9.4V9h-2v6l4.2 2.5l1-1.7z"/></svg>'
    ),
    "timer-off": (
        '<svg viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" '
        'stroke-linecap="round" stroke-linejoin="round">'
        '<line x1="10" y1="2" x2="14" y2="2"/><line x1="2" y1="2" x2="22" y2="22"/>'
        '<path d="M7.1 7.7A8 8 0 0 0 18.3 18.9"/><path d="M9.5 6.4A8 8 0 0 1 19.6 16.5"/></svg>'
    ),
    "timer-reset": (
        '<svg viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" '
        'stroke-linecap="round" stroke-linejoin="round">'
        '<line x1="10" y1="2" x2="14" y2="2"/><line x1="12" y1="14" x2="15" y2="11"/>'
        '<path d="M3 14a9 9 0 1 0 3-6.7L3 10"/><polyline points="3 4 3 10 9 10"/></svg>'
    ),
    "stopwatch": (
        '<svg viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" '
        'stroke-linecap="round" stroke-linejoin="round">'
        '<circle cx="12" cy="13" r="8"/><path d="M12 9v4l2 2"/>'
        '<path d="M5 3L2 6"/><path d="M22 6l-3-3"/><line x1="12" y1="2" x2="12" y2="5"/></svg>'
    ),
    "hourglass": (
        '<svg viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" '
        'stroke-linecap="round" stroke-linejoin="round">'
        '<path d="M5 22h14"/><path d="M5 2h14"/>'
        '<path d="M17 22v-4.2a2 2 0 0 0-.6-1.4L12 12l-4.4 4.4a2 2 0 0 0-.6 1.4V22"/>'
        '<path d="M7 2v4.2a2 2 0 0 0 .6 1.4L12 12l4.4-4.4a2 2 0 0 0 .6-1.4V2"/></svg>'
    ),
}
