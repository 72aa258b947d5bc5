import unittest

from counter_sim.entities import Customer, CustomerStatus, NO_SERVER
from counter_sim.errors import PreconditionViolation
from counter_sim.metrics import format_entry


class TestCustomerTransitions(unittest.TestCase):

    def setUp(self):
        self.c = Customer.enter(4, 2.0)

    def test_enter(self):
        self.assertEqual(self.c.status, CustomerStatus.ARRIVES)
        self.assertEqual(self.c.server_id, NO_SERVER)
        self.assertEqual((self.c.entry_time, self.c.present_time, self.c.next_time), (2.0, 2.0, 2.0))
        self.assertTrue(self.c.first_wait)
        self.assertFalse(self.c.greedy)

    def test_arrives_to_waits_keeps_present_time(self):
        w = self.c.arrives_to_waits(3.5, 2)
        self.assertEqual(w.status, CustomerStatus.WAITS)
        self.assertEqual(w.present_time, 2.0)
        self.assertEqual(w.next_time, 3.5)
        self.assertEqual(w.server_id, 2)
        self.assertTrue(w.first_wait)
        # the original value is untouched
        self.assertEqual(self.c.status, CustomerStatus.ARRIVES)

    def test_repeat_wait_is_not_logged(self):
        w = self.c.arrives_to_waits(3.5, 2).waits_to_waits(3.5)
        self.assertFalse(w.first_wait)
        self.assertEqual((w.present_time, w.next_time), (3.5, 3.5))
        served = w.waits_to_served(3.5)
        self.assertTrue(served.first_wait)
        self.assertAlmostEqual(served.wait_duration(), 1.5)

    def test_served_to_done(self):
        done = self.c.arrives_to_served(1).served_to_done(4.25)
        self.assertEqual(done.status, CustomerStatus.DONE)
        self.assertEqual(done.present_time, 4.25)
        self.assertEqual(done.entry_time, 2.0)
        self.assertTrue(done.is_terminal)

    def test_leaves_resets_server(self):
        left = self.c.arrives_to_leaves()
        self.assertEqual(left.status, CustomerStatus.LEAVES)
        self.assertEqual(left.server_id, NO_SERVER)
        self.assertTrue(left.is_terminal)

    def test_terminal_customers_cannot_move(self):
        done = self.c.arrives_to_served(1).served_to_done(3.0)
        with self.assertRaises(PreconditionViolation) as ctx:
            done.served_to_done(5.0)
        self.assertEqual(ctx.exception.customer_id, 4)
        with self.assertRaises(PreconditionViolation):
            self.c.arrives_to_leaves().arrives_to_served(1)

    def test_wrong_state(self):
        with self.assertRaises(PreconditionViolation):
            self.c.waits_to_served(3.0)
        with self.assertRaises(PreconditionViolation):
            self.c.reassign(3)


class TestCustomerOrdering(unittest.TestCase):

    def test_time_then_id(self):
        a = Customer.enter(2, 1.0)
        b = Customer.enter(1, 1.0)
        c = Customer.enter(3, 0.5)
        self.assertEqual(sorted([a, b, c]), [c, b, a])
        self.assertEqual([x.cid for x in sorted([a, b, c])], [3, 1, 2])

    def test_equality_by_id(self):
        a = Customer.enter(7, 1.0)
        self.assertEqual(a, a.arrives_to_waits(2.0, 1))
        self.assertNotEqual(a, Customer.enter(8, 1.0))
        self.assertEqual(len({a, a.arrives_to_leaves()}), 1)


class TestLogFormat(unittest.TestCase):

    def test_lines(self):
        c = Customer.enter(2, 1.0)
        self.assertEqual(format_entry(c), "1.000 2 arrives")
        self.assertEqual(format_entry(c.arrives_to_leaves()), "1.000 2 leaves")
        w = c.arrives_to_waits(1.5, 1)
        self.assertEqual(format_entry(w, "server 1"), "1.000 2 waits to be served by server 1")
        s = w.waits_to_served(1.5)
        self.assertEqual(format_entry(s, "self-check 3"), "1.500 2 served by self-check 3")
        self.assertEqual(format_entry(s.served_to_done(3.0), "server 1"), "3.000 2 done serving by server 1")


if __name__ == "__main__":
    unittest.main()
