from agrilink.adapters.outbound.in_memory_catalog import DEMO_INVENTORY
from agrilink.core.domain.model.cart import Cart, CartLine
from agrilink.core.domain.service.checkout import cart_to_command

KALE = CartLine("v1", "Kale (Organic)", 25, "bunch", 1)
EGGS = CartLine("e1", "Free-range Eggs", 65, "dozen", 1)


def test_empty_cart_subtotal_is_zero():
    assert Cart().subtotal() == 0
    assert Cart().is_empty()


def test_add_appends_new_lines_in_order():
    cart = Cart().add(KALE).add(EGGS)
    assert [ln.product_id for ln in cart.lines] == ["v1", "e1"]
    assert cart.subtotal() == 25 + 65


def test_repeated_add_merges_quantity():
    cart = Cart().add(KALE).add(EGGS).add(KALE).add(CartLine("v1", "Kale", 25, "bunch", 3))
    assert len(cart.lines) == 2
    assert cart.get("v1").qty == 5
    assert cart.subtotal() == 25 * 5 + 65


def test_merge_keeps_first_price_snapshot():
    cart = Cart().add(KALE).add(CartLine("v1", "Kale", 40, "bunch", 1))
    line = cart.get("v1")
    assert line.price == 25
    assert line.qty == 2
    assert cart.subtotal() == 50


def test_merge_invariant_over_random_sequence():
    adds = [KALE, EGGS, KALE, KALE, EGGS, CartLine("f1", "Tilapia", 95, "kg", 2)]
    cart = Cart()
    for ln in adds:
        cart = cart.add(ln)

    expected = {}
    prices = {}
    for ln in adds:
        expected[ln.product_id] = expected.get(ln.product_id, 0) + ln.qty
        prices.setdefault(ln.product_id, ln.price)

    assert len({ln.product_id for ln in cart.lines}) == len(cart.lines)
    assert cart.subtotal() == sum(prices[k] * q for k, q in expected.items())


def test_add_with_non_positive_qty_counts_as_one():
    cart = Cart().add(CartLine("v1", "Kale", 25, "bunch", 0))
    assert cart.get("v1").qty == 1


def test_cart_is_immutable():
    cart = Cart().add(KALE)
    cart.add(KALE)
    cart.adjust_quantity("v1", 5)
    assert cart.get("v1").qty == 1


def test_set_quantity_clamps_to_one():
    cart = Cart().add(KALE)
    assert cart.set_quantity("v1", 4).get("v1").qty == 4
    assert cart.set_quantity("v1", 0).get("v1").qty == 1
    assert cart.set_quantity("v1", -10).get("v1").qty == 1


def test_adjust_quantity_never_below_one():
    cart = Cart().add(KALE).set_quantity("v1", 3)
    for delta in (-1, -2, -100, -(10**9)):
        assert cart.adjust_quantity("v1", delta).get("v1").qty >= 1
    assert cart.adjust_quantity("v1", -100).get("v1").qty == 1
    assert cart.adjust_quantity("v1", +2).get("v1").qty == 5


def test_unknown_product_is_a_no_op():
    cart = Cart().add(KALE)
    assert cart.set_quantity("zz", 3) == cart
    assert cart.adjust_quantity("zz", 1) == cart
    assert cart.remove("zz") == cart


def test_remove_is_idempotent():
    cart = Cart().add(KALE).add(EGGS)
    once = cart.remove("v1")
    twice = once.remove("v1")
    assert once == twice
    assert [ln.product_id for ln in twice.lines] == ["e1"]


def test_clear():
    assert Cart().add(KALE).clear() == Cart()


def test_line_from_product_snapshots_catalog_data():
    product = DEMO_INVENTORY[0]
    line = CartLine.from_product(product)
    assert (line.product_id, line.price, line.unit, line.qty) == ("v1", 25, "bunch", 1)


def test_cart_to_command():
    cart = Cart().add(KALE).add(EGGS).set_quantity("e1", 2)
    cmd = cart_to_command(cart, pickup_point="School gate")
    assert cmd.pickup_point == "School gate"
    assert [(it.product_id, it.qty, it.price) for it in cmd.items] == [
        ("v1", 1, 25),
        ("e1", 2, 65),
    ]
