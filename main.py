from __future__ import annotations

import time
from typing import Optional

from kivy.app import App
from kivy.clock import Clock
from kivy.core.window import Window
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.button import Button
from kivy.uix.gridlayout import GridLayout
from kivy.uix.label import Label
from kivy.utils import platform

from services.controller import PetController, PetSnapshot
from services.logs import setup_logging
from services.scheduler import Scheduler
from services.tuning import Tuning

logger = setup_logging()


def describe(snap: PetSnapshot) -> str:
    """Plain-text status block for the main label."""
    if not snap.alive:
        return f"{snap.name} lived for {snap.age} hours and has passed away."
    lines = [
        f"{snap.emoji}  {snap.name}  ({snap.mood}, {snap.age}h)",
        "  ".join(f"{k}: {v:.1f}" for k, v in snap.stats.items()),
        f"next decay in {snap.seconds_until_decay}s",
    ]
    for d in snap.dhikr:
        lines.append(f"{d.category}: {d.in_set}/{Tuning.DHIKR_SET_SIZE}  sets {d.sets}")
    done = [slot for slot, ok in snap.prayers.items() if ok]
    lines.append("prayed: " + (", ".join(done) if done else "-"))
    if snap.achievements:
        lines.append("achievements: " + ", ".join(snap.achievements))
    if snap.last_action_message:
        lines.append(snap.last_action_message)
    return "\n".join(lines)


class SoulPetApp(App):
    title = "SoulGotchi"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.scheduler = Scheduler(time.time)
        self.controller: Optional[PetController] = None
        self.status: Optional[Label] = None

    # ---------- App lifecycle ----------
    def build(self):
        if platform not in ("android", "ios"):
            Window.size = (420, 780)
        # Persistence resolves user_data_dir through the running app.
        self.controller = PetController(self.scheduler)
        restored = self.controller.load_or_seed()
        logger.info("app start (%s)", "restored" if restored else "new pet")

        root = BoxLayout(orientation="vertical", padding=8, spacing=6)
        self.status = Label(text="", halign="left", valign="top")
        self.status.bind(size=lambda lbl, size: setattr(lbl, "text_size", size))
        root.add_widget(self.status)
        root.add_widget(self._button_grid())

        Clock.schedule_interval(self._tick, 0.25)
        self._refresh()
        return root

    def on_pause(self):
        if self.controller:
            self.controller.save_all()
        return True

    def on_stop(self):
        if self.controller:
            self.controller.teardown()

    # ---------- Build helpers ----------
    def _button_grid(self) -> GridLayout:
        grid = GridLayout(cols=2, size_hint_y=0.55, spacing=4)
        for category in Tuning.DHIKR_STAT:
            grid.add_widget(self._button(category, lambda c=category: self.controller.activity.perform_dhikr(c)))
        for slot in Tuning.PRAYER_SLOTS:
            grid.add_widget(self._button(slot, lambda s=slot: self.controller.activity.toggle_prayer(s)))
        for subject in Tuning.STUDY_SUBJECTS:
            grid.add_widget(self._button(f"Study {subject}", lambda s=subject: self.controller.learning.study(s)))
        grid.add_widget(self._button("Rest", lambda: self.controller.activity.rest()))
        grid.add_widget(self._button("New pet", lambda: self.controller.reset_pet()))
        return grid

    def _button(self, text: str, action) -> Button:
        btn = Button(text=text)
        btn.bind(on_release=lambda *_: self._act(action))
        return btn

    def _act(self, action) -> None:
        action()
        self._refresh()

    # ---------- Tick ----------
    def _tick(self, dt: float):
        self.scheduler.run_pending()
        self._refresh()

    def _refresh(self) -> None:
        if self.controller and self.status:
            self.status.text = describe(self.controller.snapshot())


def run() -> None:
    SoulPetApp().run()


if __name__ == "__main__":
    run()
