import unittest

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from storefront.database.base import Base
from storefront.models import Godown, GodownLocalBody, GodownWard, LocalBody, Profile
from storefront.services.geography_service import eligible_godown_ids_for_user, resolve_eligible_godown_ids


class GeographyResolverTest(unittest.TestCase):
    def setUp(self):
        engine = create_engine("sqlite:///:memory:")
        Base.metadata.create_all(bind=engine)
        self.db = sessionmaker(bind=engine, expire_on_commit=False)()

        self.db.add_all(
            [
                LocalBody(id=1, name="Region R", ward_count=10),
                LocalBody(id=2, name="Region Q", ward_count=10),
                Godown(id=1, name="Micro W", godown_type="micro"),
                Godown(id=2, name="Local backstock", godown_type="local"),
                Godown(id=3, name="Area hub", godown_type="area"),
                Godown(id=4, name="Closed micro", godown_type="micro", is_active=False),
            ]
        )
        self.db.flush()
        self.db.add_all(
            [
                GodownWard(godown_id=1, local_body_id=1, ward_number=3),
                GodownWard(godown_id=1, local_body_id=1, ward_number=4),
                GodownWard(godown_id=4, local_body_id=1, ward_number=3),
                GodownLocalBody(godown_id=1, local_body_id=1),
                GodownLocalBody(godown_id=2, local_body_id=1),
                GodownLocalBody(godown_id=3, local_body_id=1),
                Profile(user_id="cust-1", local_body_id=1, ward_number=3),
                Profile(user_id="cust-2", local_body_id=1, ward_number=None),
            ]
        )
        self.db.commit()

    def tearDown(self):
        self.db.close()

    def test_micro_godown_requires_matching_ward(self):
        self.assertIn(1, resolve_eligible_godown_ids(self.db, 1, 3))
        self.assertNotIn(1, resolve_eligible_godown_ids(self.db, 1, 5))

    def test_area_godown_serves_every_ward(self):
        self.assertEqual(resolve_eligible_godown_ids(self.db, 1, 5), {3})
        self.assertEqual(resolve_eligible_godown_ids(self.db, 1, 3), {1, 3})

    def test_local_and_inactive_godowns_are_excluded(self):
        eligible = resolve_eligible_godown_ids(self.db, 1, 3)
        self.assertNotIn(2, eligible)
        self.assertNotIn(4, eligible)

    def test_missing_location_yields_nothing(self):
        self.assertEqual(resolve_eligible_godown_ids(self.db, None, 3), set())
        self.assertEqual(resolve_eligible_godown_ids(self.db, 1, None), set())
        self.assertEqual(resolve_eligible_godown_ids(self.db, 2, 1), set())

    def test_resolves_from_customer_profile(self):
        self.assertEqual(eligible_godown_ids_for_user(self.db, "cust-1"), {1, 3})
        self.assertEqual(eligible_godown_ids_for_user(self.db, "cust-2"), set())
        self.assertEqual(eligible_godown_ids_for_user(self.db, "nobody"), set())


if __name__ == "__main__":
    unittest.main()
