"""Home theater facade over three subsystems."""

from typing import Callable, List

from patterns.src.registry import register_demo

Echo = Callable[[str], None]


class Amplifier:
    def __init__(self, echo: Echo = print):
        self._echo = echo

    def on(self) -> None:
        self._echo("Amplifier is on")

    def set_volume(self, level: int) -> None:
        self._echo(f"Amplifier volume set to {level}")

    def off(self) -> None:
        self._echo("Amplifier is off")


class DvdPlayer:
    def __init__(self, echo: Echo = print):
        self._echo = echo

    def on(self) -> None:
        self._echo("DVD Player is on")

    def play(self, movie: str) -> None:
        self._echo(f"DVD Player is playing: {movie}")

    def stop(self) -> None:
        self._echo("DVD Player stopped")

    def off(self) -> None:
        self._echo("DVD Player is off")


class Projector:
    def __init__(self, echo: Echo = print):
        self._echo = echo

    def on(self) -> None:
        self._echo("Projector is on")

    def set_input(self, source: str) -> None:
        self._echo(f"Projector input set to {source}")

    def off(self) -> None:
        self._echo("Projector is off")


class HomeTheaterFacade:
    """One call per scenario instead of driving each device."""

    VOLUME = 5

    def __init__(self, amplifier: Amplifier, dvd: DvdPlayer, projector: Projector, echo: Echo = print):
        self._amplifier = amplifier
        self._dvd = dvd
        self._projector = projector
        self._echo = echo

    def watch_movie(self, movie: str) -> None:
        self._echo("Get ready to watch a movie...")
        self._amplifier.on()
        self._amplifier.set_volume(self.VOLUME)
        self._projector.on()
        self._projector.set_input("DVD Player")
        self._dvd.on()
        self._dvd.play(movie)

    def end_movie(self) -> None:
        self._echo("Shutting down the home theater...")
        self._dvd.stop()
        self._dvd.off()
        self._projector.off()
        self._amplifier.off()


@register_demo("facade", "Home theater facade driving amplifier, projector and DVD player")
def run_demo() -> List[str]:
    lines: List[str] = []
    echo = lines.append

    theater = HomeTheaterFacade(Amplifier(echo), DvdPlayer(echo), Projector(echo), echo)
    theater.watch_movie("Inception")
    theater.end_movie()

    return lines
