"""
Presentation-side helpers shared by the pages: transient notifications,
redirects, request sequencing and chart handles.
"""

import time


class Notification:
    def __init__(self, message, level, created_at):
        self.message = message
        self.level = level
        self.created_at = created_at

    def __repr__(self):
        return f"Notification({self.level!r}, {self.message!r})"


class Notifier:
    """Transient, dismissible notifications that expire after ``duration`` seconds."""

    def __init__(self, duration=3.0, clock=time.monotonic):
        self.duration = duration
        self.clock = clock
        self._items = []

    def notify(self, message, level='success'):
        notification = Notification(message, level, self.clock())
        self._items.append(notification)
        return notification

    def error(self, message):
        return self.notify(message, 'error')

    def dismiss(self, notification):
        if notification in self._items:
            self._items.remove(notification)

    @property
    def active(self):
        now = self.clock()
        self._items = [n for n in self._items if now - n.created_at < self.duration]
        return list(self._items)


class Redirect:
    def __init__(self, target, delay):
        self.target = target
        self.delay = delay

    def __eq__(self, other):
        return isinstance(other, Redirect) and (self.target, self.delay) == (other.target, other.delay)

    def __repr__(self):
        return f"Redirect({self.target!r}, delay={self.delay})"


class Navigator:
    """Collects redirect requests; the host shell performs them after ``delay``."""

    def __init__(self):
        self.redirects = []

    def redirect(self, target, delay=0):
        self.redirects.append(Redirect(target, delay))

    @property
    def pending(self):
        return self.redirects[-1] if self.redirects else None


class RequestSequencer:
    """Monotonic tickets: only the newest request may apply its response."""

    def __init__(self):
        self._latest = 0

    def next(self):
        self._latest += 1
        return self._latest

    def is_current(self, ticket):
        return ticket == self._latest


class Chart:
    def __init__(self, kind, labels, datasets):
        self.kind = kind
        self.labels = labels
        self.datasets = datasets
        self.destroyed = False

    def destroy(self):
        self.destroyed = True
