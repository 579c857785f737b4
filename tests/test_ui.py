from streamlit.testing.v1 import AppTest

from jurispol.client import RelayReply
from jurispol.state import ChatSession

APP = "../ui/streamlit_app.py"


class FakeRelay:
    def send_message(self, history, user_input):
        return RelayReply(text="respuesta", sources=[])


def started_app():
    session = ChatSession(FakeRelay())
    session.send("¿Qué hago en una riña?")
    at = AppTest.from_file(APP, default_timeout=30)
    at.session_state["session"] = session
    at.run()
    return at, session


def test_clear_asks_for_confirmation_first():
    at, session = started_app()

    at.button(key="clear").click().run()

    assert len(session.state.messages) == 2
    assert "borrar el historial" in at.warning[0].value

    at.button(key="clear-yes").click().run()

    assert session.state.messages == []
    assert session.state.is_loading is False
    assert session.state.error is None


def test_clear_can_be_cancelled():
    at, session = started_app()

    at.button(key="clear").click().run()
    at.button(key="clear-no").click().run()

    assert len(session.state.messages) == 2
    assert len(at.warning) == 0
