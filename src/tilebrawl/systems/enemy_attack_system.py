from esper import World

from tilebrawl.components.combatant import Enemy
from tilebrawl.events.bus import EventBus, EVENT_ENEMY_ATTACK, EVENT_HEALTH_DAMAGE, EVENT_TICK
from tilebrawl.systems.state_utils import enemy_entity, get_attack_timer, is_playing, player_entity


class EnemyAttackSystem:
    """Counts down the attack timer and strikes the player once per elapsed interval."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    def on_tick(self, sender, **kwargs):
        if not is_playing(self.world):
            return
        try:
            timer = get_attack_timer(self.world)
            enemy = enemy_entity(self.world)
            player = player_entity(self.world)
        except KeyError:
            return
        timer.remaining -= float(kwargs.get('dt', 0.0))
        # A long tick can cover several intervals; stop as soon as the player falls.
        while timer.remaining <= 0.0 and is_playing(self.world):
            timer.remaining += timer.interval
            attack = self.world.component_for_entity(enemy, Enemy).attack
            self.event_bus.emit(EVENT_ENEMY_ATTACK, amount=attack)
            self.event_bus.emit(EVENT_HEALTH_DAMAGE, target_entity=player, amount=attack, reason='enemy_attack')
