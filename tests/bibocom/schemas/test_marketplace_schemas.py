"""Tests for the API schemas."""

from bibocom.schemas.cart import CartItem, CartProduct
from bibocom.schemas.message import Conversation, MediaType, Message, local_message_id
from bibocom.schemas.user import Partner, UserRole


def test_message_accepts_camel_case():
    message = Message.model_validate(
        {"id": 1, "senderId": 2, "receiverId": 3, "content": "hi", "isRead": True}
    )
    assert message.sender_id == 2
    assert message.is_read
    assert message.involves(3)
    assert not message.involves(4)


def test_client_flags_are_not_serialised():
    message = Message(id=1, sender_id=2, receiver_id=3, is_deleting=True, is_local=True)
    dumped = message.model_dump(by_alias=True)
    assert "isDeleting" not in dumped
    assert "isLocal" not in dumped


def test_media_type_from_content_type():
    assert MediaType.from_content_type("image/png") == MediaType.IMAGE
    assert MediaType.from_content_type("video/mp4") == MediaType.VIDEO


def test_local_message_ids_are_negative_and_distinct():
    ids = [local_message_id() for _ in range(3)]
    assert all(i < 0 for i in ids)
    assert len(set(ids)) == 3
    assert ids == sorted(ids, reverse=True)


def test_conversation_matches_name_or_last_message():
    conversation = Conversation(partner_id=1, partner_name="Chez Awa", last_message="Le prix ?")
    assert conversation.matches("awa")
    assert conversation.matches("PRIX")
    assert conversation.matches("")
    assert not conversation.matches("moussa")


def test_cart_item_bounds():
    def item(quantity, stock):
        return CartItem(id=1, product_id=1, quantity=quantity, product=CartProduct(price=100, stock=stock))

    assert not item(1, 5).can_decrease
    assert item(2, 5).can_decrease
    assert not item(5, 5).can_increase
    assert item(4, 5).can_increase
    assert item(50, None).can_increase
    assert item(50, 0).can_increase
    assert item(3, None).line_total == 300


def test_partner_placeholder():
    partner = Partner.placeholder(7)
    assert partner.is_placeholder
    assert partner.username == "user7"
    assert partner.display_name == "Shop"
    assert partner.partner_role == "Member"


def test_partner_from_empty_profile():
    partner = Partner.from_profile(7, {})
    assert partner.first_name == "User"
    assert partner.last_name == "7"
    assert not partner.is_placeholder


def test_user_role_label():
    assert UserRole.MERCHANT.label == "Merchant"
