import unittest

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from storefront.database.base import Base
from storefront.models import (
    Godown,
    GodownLocalBody,
    GodownStock,
    GodownWard,
    LocalBody,
    Product,
    Profile,
    SellerProduct,
)
from storefront.services.catalog_service import area_products, section_products


class CatalogServiceTest(unittest.TestCase):
    def setUp(self):
        engine = create_engine("sqlite:///:memory:")
        Base.metadata.create_all(bind=engine)
        self.db = sessionmaker(bind=engine, expire_on_commit=False)()

        self.db.add_all(
            [
                LocalBody(id=1, name="Region R", ward_count=6),
                Godown(id=1, name="Micro", godown_type="micro"),
                Godown(id=2, name="Local", godown_type="local"),
                Godown(id=3, name="Area", godown_type="area"),
                Product(id=1, name="Rice", price=50, mrp=55, section="featured"),
                Product(id=2, name="Sugar", price=40, mrp=42, section="low_budget"),
                Product(id=3, name="Salt", price=20, mrp=22),
                Product(id=4, name="Tea", price=90, mrp=99, is_active=False, section="featured"),
            ]
        )
        self.db.flush()
        self.db.add_all(
            [
                GodownWard(godown_id=1, local_body_id=1, ward_number=2),
                GodownLocalBody(godown_id=1, local_body_id=1),
                GodownLocalBody(godown_id=2, local_body_id=1),
                GodownLocalBody(godown_id=3, local_body_id=1),
                GodownStock(godown_id=1, product_id=1, quantity=4, purchase_price=40),
                GodownStock(godown_id=1, product_id=2, quantity=0, purchase_price=30),
                GodownStock(godown_id=2, product_id=3, quantity=9, purchase_price=15),
                GodownStock(godown_id=3, product_id=4, quantity=9, purchase_price=70),
                SellerProduct(id=1, seller_id="S1", name="Pickle", price=80, stock=3,
                              area_godown_id=3, is_approved=True),
                SellerProduct(id=2, seller_id="S1", name="Jam", price=60, stock=3,
                              area_godown_id=3, is_approved=False),
                SellerProduct(id=3, seller_id="S2", name="Honey", price=120, stock=0,
                              area_godown_id=3, is_approved=True),
                Profile(user_id="cust-1", local_body_id=1, ward_number=2),
                Profile(user_id="cust-far", local_body_id=None, ward_number=None),
            ]
        )
        self.db.commit()

    def tearDown(self):
        self.db.close()

    def test_area_products_for_customer(self):
        rows = area_products(self.db, "cust-1")
        names = [(row["name"], row["source"]) for row in rows]
        self.assertEqual(names, [("Rice", "product"), ("Pickle", "seller_product")])
        pickle = rows[1]
        self.assertEqual(pickle["section"], "seller")
        self.assertEqual(pickle["seller_id"], "S1")

    def test_customer_without_location_sees_nothing(self):
        self.assertEqual(area_products(self.db, "cust-far"), [])

    def test_sections_grouped_with_labels(self):
        groups = {group["section"]: group for group in section_products(self.db)}
        self.assertEqual(set(groups), {"featured", "low_budget"})
        self.assertEqual(groups["featured"]["label"], "Featured Products")
        self.assertEqual([row["name"] for row in groups["featured"]["items"]], ["Rice"])


if __name__ == "__main__":
    unittest.main()
