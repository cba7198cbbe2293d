import pytest

from app.services import channel_resolver
from app.services.youtube_client import CredentialMissing


class HandleClient:
    def __init__(self, handles: dict[str, str] | None = None, api_key: str | None = "dummy-key") -> None:
        self.handles = handles or {}
        self.api_key = api_key
        self.lookups: list[str] = []

    async def resolve_handle(self, handle: str) -> str | None:
        if not self.api_key:
            raise CredentialMissing("YouTube API key is not configured")
        self.lookups.append(handle)
        return self.handles.get(handle)


@pytest.mark.asyncio
async def test_extract_channel_id_passes_through_raw_id() -> None:
    channel_id = "UC" + "A" * 22
    client = HandleClient()
    assert await channel_resolver.extract_channel_id(channel_id, client) == channel_id
    assert client.lookups == []


@pytest.mark.asyncio
async def test_extract_channel_id_from_urls() -> None:
    channel_id = "UC" + "B" * 22
    client = HandleClient()
    assert await channel_resolver.extract_channel_id(f"https://www.youtube.com/channel/{channel_id}", client) == channel_id
    assert (
        await channel_resolver.extract_channel_id(
            f"https://www.youtube.com/feeds/videos.xml?channel_id={channel_id}", client
        )
        == channel_id
    )


@pytest.mark.asyncio
async def test_extract_channel_id_resolves_handle() -> None:
    channel_id = "UC" + "C" * 22
    client = HandleClient({"demo": channel_id})

    assert await channel_resolver.extract_channel_id("@demo", client) == channel_id
    assert await channel_resolver.extract_channel_id("https://www.youtube.com/@demo", client) == channel_id
    assert client.lookups == ["demo", "demo"]


@pytest.mark.asyncio
async def test_extract_channel_id_handle_requires_api_key() -> None:
    with pytest.raises(CredentialMissing):
        await channel_resolver.extract_channel_id("@demo", HandleClient(api_key=None))


@pytest.mark.asyncio
async def test_extract_channel_id_handle_not_found() -> None:
    with pytest.raises(channel_resolver.ChannelResolutionError, match="not found"):
        await channel_resolver.extract_channel_id("@missing", HandleClient())


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["", "   ", "not a channel", "https://example.com/watch?v=abc"])
async def test_extract_channel_id_rejects_unsupported(raw: str) -> None:
    with pytest.raises(channel_resolver.ChannelResolutionError):
        await channel_resolver.extract_channel_id(raw, HandleClient())
