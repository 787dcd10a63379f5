import unittest
from pillbox.infra.Profile_Repository import ProfileRepository
from pillbox.logic.session.profiles import ProfileResolver
from pillbox.utilities.errors import NotFound
from pillbox.tests.fake_backend import FakeSupabase


class TestProfileResolver(unittest.TestCase):

    def setUp(self):
        self.fake = FakeSupabase()
        self.resolver = ProfileResolver(ProfileRepository(self.fake), default_family_name="Famiglia Mamma")

    def test_provisions_family_on_first_load(self):
        self.fake.add_user("tok", "u1", "anna@example.com")
        profile = self.resolver.resolve("u1")
        self.assertTrue(profile.has_family)
        self.assertTrue(profile.is_admin)
        family = self.fake.tables["families"][0]
        self.assertEqual(family["name"], "Famiglia Mamma")
        stored = self.fake.rows("profiles", id="u1")[0]
        self.assertEqual(stored["family_id"], family["id"])
        self.assertEqual(stored["role"], "admin")

    def test_custom_family_name(self):
        self.fake.add_user("tok", "u1", "anna@example.com")
        self.resolver.resolve("u1", "Rossi")
        self.assertEqual(self.fake.tables["families"][0]["name"], "Rossi")

    def test_existing_family_is_left_alone(self):
        self.fake.add_user("tok", "u2", "bob@example.com", family_id="fam", role="member")
        profile = self.resolver.resolve("u2")
        self.assertEqual(profile.family_id, "fam")
        self.assertFalse(profile.is_admin)
        self.assertEqual(self.fake.tables["families"], [])

    def test_unknown_user(self):
        with self.assertRaises(NotFound):
            self.resolver.resolve("ghost")


if __name__ == '__main__':
    unittest.main()
