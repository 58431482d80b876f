"""CLI entry point for rtcsignal."""

import json
from pathlib import Path

import click

from rtcsignal import __version__
from rtcsignal.config import load_config
from rtcsignal.logging import setup_logging


def _synthetic_stream(audio: int, video: int):
    """Build a MediaStream of silent audio and blank video tracks."""
    from aiortc.mediastreams import AudioStreamTrack, VideoStreamTrack

    from rtcsignal.streams import MediaStream

    tracks = [AudioStreamTrack() for _ in range(audio)]
    tracks += [VideoStreamTrack() for _ in range(video)]
    return MediaStream(tracks)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to config file.",
)
@click.pass_context
def main(ctx: click.Context, config: Path | None) -> None:
    """rtcsignal - offer/answer signaling state machine."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config)
    ctx.obj["logger"] = setup_logging(ctx.obj["config"])


@main.command()
def version() -> None:
    """Show version."""
    click.echo(f"rtcsignal version {__version__}")


@main.command()
@click.option("--audio", default=1, show_default=True, help="Number of audio tracks.")
@click.option("--video", default=0, show_default=True, help="Number of video tracks.")
@click.option("--json", "as_json", is_flag=True, help="Print the offer as JSON.")
@click.pass_context
def offer(ctx: click.Context, audio: int, video: int, as_json: bool) -> None:
    """Print an offer for synthetic local tracks."""
    import asyncio

    from rtcsignal.peer import PeerConnection

    async def _offer():
        pc = PeerConnection(configuration=ctx.obj["config"])
        if audio or video:
            pc.add_stream(_synthetic_stream(audio, video))
        try:
            return await pc.create_offer()
        finally:
            await pc.close()

    description = asyncio.run(_offer())
    if as_json:
        click.echo(json.dumps(description.to_dict()))
    else:
        click.echo(description.sdp, nl=False)


@main.command()
@click.option("--audio", default=1, show_default=True, help="Audio tracks per peer.")
@click.option("--video", default=0, show_default=True, help="Video tracks per peer.")
@click.pass_context
def negotiate(ctx: click.Context, audio: int, video: int) -> None:
    """Run an offer/answer exchange between two in-process peers."""
    import asyncio

    from rtcsignal.errors import SignalingError
    from rtcsignal.peer import PeerConnection

    config = ctx.obj["config"]

    async def _negotiate() -> None:
        caller = PeerConnection(configuration=config)
        callee = PeerConnection(configuration=config)
        for pc in (caller, callee):
            if audio or video:
                pc.add_stream(_synthetic_stream(audio, video))

        def report(step: str) -> None:
            click.echo(
                f"{step:<28} caller={caller.signaling_state.value:<20} "
                f"callee={callee.signaling_state.value}"
            )

        try:
            offer = await caller.create_offer()
            await caller.set_local_description(offer)
            report("caller set local offer")
            await callee.set_remote_description(offer)
            report("callee set remote offer")
            answer = await callee.create_answer()
            await callee.set_local_description(answer)
            report("callee set local answer")
            await caller.set_remote_description(answer)
            report("caller set remote answer")
        finally:
            await caller.close()
            await callee.close()

    try:
        asyncio.run(_negotiate())
    except SignalingError as e:
        click.echo(f"Error: {e.kind.value}: {e}", err=True)
        raise SystemExit(1)
    click.echo("Negotiation complete")


if __name__ == "__main__":
    main()
