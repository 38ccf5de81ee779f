"""Chat subsystem: the interaction boundary, message primitives and the terminal surface."""

from gs_relay.chat.interaction import ComponentInteraction as ComponentInteraction
from gs_relay.chat.interaction import Interaction as Interaction
from gs_relay.chat.interaction import Subscription as Subscription
from gs_relay.chat.messages import Embed as Embed
from gs_relay.chat.messages import Reply as Reply
from gs_relay.chat.messages import SelectMenu as SelectMenu
