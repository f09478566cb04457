from esper import World

from tilebrawl.components.health import Health
from tilebrawl.events.bus import EventBus, EVENT_HEALTH_DAMAGE, EVENT_HEALTH_SET, EVENT_HEALTH_CHANGED


class HealthSystem:
    """Applies damage and health updates to Health components.

    A set request carries an already-resolved value; max_hp grows to fit, which
    is how level-up boosts push the player past the starting value. Emits
    EVENT_HEALTH_CHANGED after every mutation.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_HEALTH_DAMAGE, self.on_health_damage)
        self.event_bus.subscribe(EVENT_HEALTH_SET, self.on_health_set)

    def on_health_damage(self, sender, **kwargs):
        target_entity = kwargs.get('target_entity')
        amount = kwargs.get('amount', 0)
        reason = kwargs.get('reason', 'unknown')

        if target_entity is None or amount <= 0:
            return

        try:
            health = self.world.component_for_entity(target_entity, Health)
        except KeyError:
            return

        old_hp = health.current
        health.current -= amount
        health.clamp()
        self._emit_changed(target_entity, health, health.current - old_hp, reason)

    def on_health_set(self, sender, **kwargs):
        target_entity = kwargs.get('target_entity')
        value = kwargs.get('value')
        reason = kwargs.get('reason', 'unknown')

        if target_entity is None or value is None:
            return

        try:
            health = self.world.component_for_entity(target_entity, Health)
        except KeyError:
            return

        old_hp = health.current
        health.current = int(value)
        health.clamp()
        if health.current == old_hp:
            return
        health.max_hp = max(health.max_hp, health.current)
        self._emit_changed(target_entity, health, health.current - old_hp, reason)

    def _emit_changed(self, entity: int, health: Health, delta: int, reason: str) -> None:
        self.event_bus.emit(
            EVENT_HEALTH_CHANGED,
            entity=entity,
            current=health.current,
            max_hp=health.max_hp,
            delta=delta,
            reason=reason,
        )
