import unittest

from workload_timeline.utils.errors import MutationError, error_to_string, friendly_relation_error


class TestErrorMessages(unittest.TestCase):
    def test_error_to_string(self) -> None:
        self.assertEqual(error_to_string(None), "")
        self.assertEqual(error_to_string(MutationError("Validation failed")), "Validation failed")
        self.assertEqual(error_to_string(RuntimeError()), "RuntimeError")
        self.assertEqual(error_to_string("plain"), "plain")
        self.assertEqual(error_to_string({"message": "from dict"}), "from dict")
        self.assertEqual(error_to_string({"code": 1, "detail": "x"}), "Unknown error object (keys: code,detail)")
        self.assertEqual(error_to_string(42), "Unknown error")

    def test_friendly_relation_error(self) -> None:
        self.assertEqual(
            friendly_relation_error("Related issue doesn't belong to the same project"),
            "Issues must be in the same project",
        )
        self.assertEqual(friendly_relation_error("Relation Already Exists"), "This relation already exists")
        self.assertEqual(friendly_relation_error("Server exploded"), "Server exploded")


if __name__ == "__main__":
    unittest.main(verbosity=2)
