"""Tests for :mod:`podclient.locks`."""

from threading import Event, Thread
from unittest import TestCase
import time

from ..locks import HostLocks


class TestHostLocks(TestCase):
    """Tests for :class:`.HostLocks`."""

    def setUp(self):
        self.locks = HostLocks()

    def test_released_after_use(self):
        """Nothing is kept for a host once no one holds its lock."""
        for i in range(100):
            with self.locks.hold(f'h{i}.example'):
                self.assertEqual(self.locks.waiting(f'h{i}.example'), 1)
        self.assertEqual(self.locks._entries, {})
        self.assertEqual(self.locks.waiting('h0.example'), 0)

    def test_released_on_error(self):
        with self.assertRaises(RuntimeError):
            with self.locks.hold('pod.example'):
                raise RuntimeError('nope')
        self.assertEqual(self.locks._entries, {})

    def test_reentrant(self):
        """The same thread can hold a host's lock twice."""
        with self.locks.hold('pod.example'):
            with self.locks.hold('pod.example') as inner:
                self.assertEqual(self.locks.waiting('pod.example'), 2)
                self.assertFalse(inner.superseded)
        self.assertEqual(self.locks._entries, {})

    def test_not_superseded_alone(self):
        with self.locks.hold('pod.example') as turn:
            self.assertFalse(turn.superseded)
            turn.complete()
        with self.locks.hold('pod.example') as turn:
            self.assertFalse(turn.superseded)

    def test_superseded_while_waiting(self):
        """A waiter learns that the holder completed its work."""
        held, release = Event(), Event()
        seen = []

        def first():
            with self.locks.hold('pod.example') as turn:
                held.set()
                release.wait(5)
                turn.complete()

        def second():
            with self.locks.hold('pod.example') as turn:
                seen.append(turn.superseded)

        threads = [Thread(target=first), Thread(target=second)]
        threads[0].start()
        self.assertTrue(held.wait(5))
        threads[1].start()
        deadline = time.time() + 5
        while self.locks.waiting('pod.example') < 2 \
                and time.time() < deadline:
            time.sleep(0.01)
        release.set()
        for thread in threads:
            thread.join()
        self.assertEqual(seen, [True])
        self.assertEqual(self.locks._entries, {})

    def test_not_superseded_without_completion(self):
        """A waiter is not superseded when the holder gave up."""
        held, release = Event(), Event()
        seen = []

        def first():
            with self.locks.hold('pod.example'):
                held.set()
                release.wait(5)

        def second():
            with self.locks.hold('pod.example') as turn:
                seen.append(turn.superseded)

        threads = [Thread(target=first), Thread(target=second)]
        threads[0].start()
        self.assertTrue(held.wait(5))
        threads[1].start()
        deadline = time.time() + 5
        while self.locks.waiting('pod.example') < 2 \
                and time.time() < deadline:
            time.sleep(0.01)
        release.set()
        for thread in threads:
            thread.join()
        self.assertEqual(seen, [False])

    def test_other_hosts_not_blocked(self):
        """Holding one host's lock does not block another host."""
        done = Event()

        def other():
            with self.locks.hold('two.example'):
                done.set()

        with self.locks.hold('one.example'):
            thread = Thread(target=other)
            thread.start()
            self.assertTrue(done.wait(5))
        thread.join()
