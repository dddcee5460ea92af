"""Tests for pigworld.agents -- animals, pigs, wolves and trees."""

import pytest

from pigworld.agents.animal import STOMACH_EMPTY_LEVEL, STOMACH_FULL_LEVEL
from pigworld.agents.pig import OINK_SOUND_LEVEL, BoyPig, GirlPig, Pig
from pigworld.agents.tree import FOOD_DROP_PERIOD, Tree
from pigworld.agents.wolf import Wolf
from pigworld.entities.items import PIG_FOOD_ENERGY, PigFood, RopePiece
from pigworld.entities.kinds import Kind
from pigworld.simulation.engine import World, new_world
from pigworld.simulation.events import EventQueue, EventType
from pigworld.world.geometry import EAST, NORTH_EAST, SOUTH_EAST, Position


def _place(world: World, entity, row: int, column: int):
    assert world.add(entity, Position(row, column))
    return entity


def _in_love(pig: Pig) -> Pig:
    pig.put_in_mood_for_love()
    return pig


class TestAnimalState:
    """Tests for the energy, hunger and rest bookkeeping."""

    def test_starts_hungry(self) -> None:
        pig = BoyPig()
        assert pig.energy == 0
        assert pig.hungry
        assert not pig.in_mood_for_love

    def test_energy_caps_at_full_stomach(self) -> None:
        pig = BoyPig()
        pig.increase_energy(PIG_FOOD_ENERGY)
        assert pig.hungry
        pig.increase_energy(PIG_FOOD_ENERGY)
        assert pig.energy == STOMACH_FULL_LEVEL
        assert not pig.hungry

    def test_hunger_returns_below_empty_level(self) -> None:
        pig = _in_love(BoyPig())
        pig.use_energy(STOMACH_FULL_LEVEL - STOMACH_EMPTY_LEVEL)
        assert not pig.hungry
        pig.use_energy(1)
        assert pig.hungry

    def test_energy_never_negative(self) -> None:
        pig = BoyPig()
        pig.use_energy(5)
        assert pig.energy == 0

    def test_tiredness(self) -> None:
        pig = BoyPig()
        pig.increase_tiredness(2)
        assert pig.is_tired
        pig.rest()
        pig.rest()
        assert not pig.is_tired
        pig.rest()
        assert pig.tiredness == 0

    def test_negative_tiredness_rejected(self) -> None:
        with pytest.raises(ValueError):
            BoyPig().increase_tiredness(-1)

    def test_manual_controls(self) -> None:
        pig = GirlPig()
        pig.sleep()
        assert pig.tiredness == 100
        pig.wake_up()
        assert pig.tiredness == 0
        pig.feed()
        assert pig.energy == PIG_FOOD_ENERGY
        pig.put_in_mood_for_love()
        assert pig.in_mood_for_love

    def test_each_tick_costs_energy(self, world: World) -> None:
        pig = _place(world, _in_love(BoyPig()), 4, 4)
        pig.sleep(5)
        world.step()
        assert pig.energy == STOMACH_FULL_LEVEL - 1

    def test_changes_are_published(self, world: World, events: EventQueue) -> None:
        pig = _place(world, BoyPig(), 4, 4)
        events.drain()
        pig.feed()
        changed = events.drain()
        assert [e.type for e in changed] == [EventType.ENTITY_CHANGED]
        assert changed[0].data["entity"] is pig


class TestForaging:
    """Tests for hungry pigs looking for food."""

    def test_moves_onto_food_then_eats_it(self, world: World) -> None:
        pig = _place(world, BoyPig(), 5, 5)
        _place(world, PigFood(), 5, 4)

        world.step()
        assert pig.position == Position(5, 4)
        assert world.count(Kind.PIG_FOOD) == 1
        assert world.items_at(Position(5, 5), Kind.ROPE_PIECE) == pig.rope

        world.step()
        assert world.count(Kind.PIG_FOOD) == 0
        assert world.count(Kind.ROPE_PIECE) == 0
        assert pig.energy == PIG_FOOD_ENERGY - 1
        assert pig.last_action == "Eat"

    def test_wall_keeps_pig_from_food(self, world: World) -> None:
        pig = _place(world, BoyPig(), 5, 5)
        _place(world, PigFood(), 5, 4)
        world.fill_vertical_gap(5, 4)

        world.step()
        assert pig.position != Position(5, 4)
        # north and south are equally close to west; north is scanned first
        assert pig.position == Position(4, 5)
        assert world.count(Kind.PIG_FOOD) == 1

    def test_avoids_own_rope(self, world: World) -> None:
        pig = _place(world, BoyPig(), 4, 4)
        _place(world, PigFood(), 4, 7)
        piece = RopePiece(owner_id=pig.id)
        _place(world, piece, 4, 5)
        pig.rope.append(piece)

        pig.look_for_food()
        assert pig.position == Position(3, 5)
        assert len(pig.rope) == 2
        assert pig.rope[-1].position == Position(4, 4)

    def test_backtracks_to_oldest_rope(self) -> None:
        world = new_world(1, 5, seed=3)
        pig = _place(world, BoyPig(), 0, 2)
        _place(world, PigFood(), 0, 4)
        for column in (1, 3):
            piece = RopePiece(owner_id=pig.id)
            _place(world, piece, 0, column)
            pig.rope.append(piece)

        pig.look_for_food()
        assert pig.position == Position(0, 1)
        assert len(pig.rope) == 3

    def test_food_elsewhere_is_still_found(self, world: World) -> None:
        pig = _place(world, BoyPig(), 0, 0)
        _place(world, PigFood(), 8, 8)
        world.run(8)
        assert pig.position == Position(8, 8)
        world.step()
        assert world.count(Kind.PIG_FOOD) == 0

    def test_no_food_clears_rope_and_wanders(self, world: World) -> None:
        pig = _place(world, BoyPig(), 4, 4)
        pig.drop_rope()
        world.step()
        assert pig.rope == []
        assert world.count(Kind.ROPE_PIECE) == 0
        assert pig.last_action == "Wander"
        assert pig.position != Position(4, 4)


class TestWandering:
    """Tests for the persistent wandering heading."""

    def test_keeps_heading_across_ticks(self, world: World) -> None:
        boy = _place(world, _in_love(BoyPig()), 4, 0)
        boy.heading = EAST
        world.run(3)
        assert boy.last_action == "Wander"
        assert boy.position == Position(4, 3)
        assert boy.heading == EAST

    def test_blocked_heading_is_replaced(self, world: World) -> None:
        boy = _place(world, _in_love(BoyPig()), 4, 4)
        boy.heading = EAST
        world.fill_vertical_gap(4, 4)
        world.step()
        assert boy.heading not in (EAST, NORTH_EAST, SOUTH_EAST)
        assert boy.position != Position(4, 4)
        assert boy.position.column <= 4

    def test_boxed_in_animal_stays_put(self, world: World) -> None:
        pig = _place(world, BoyPig(), 4, 4)
        world.fill_horizontal_gap(3, 4)
        world.fill_horizontal_gap(4, 4)
        world.fill_vertical_gap(4, 3)
        world.fill_vertical_gap(4, 4)
        assert not pig.wander()
        assert not pig.panic()
        assert pig.position == Position(4, 4)

    def test_nowhere_to_go_on_a_single_cell(self) -> None:
        world = new_world(1, 1, seed=2)
        wolf = _place(world, Wolf(), 0, 0)
        assert not wolf.wander()
        assert wolf.position == Position(0, 0)


class TestFleeing:
    def test_runs_directly_away(self, world: World) -> None:
        pig = _place(world, BoyPig(), 4, 5)
        wolf = _place(world, Wolf(), 4, 4)
        world.step()
        assert pig.last_action == "RunFromWolf"
        assert pig.position == Position(4, 6)
        assert wolf.position == Position(4, 5)

    def test_panics_when_cornered(self) -> None:
        world = new_world(3, 3, seed=5)
        pig = _place(world, BoyPig(), 0, 0)
        _place(world, Wolf(), 1, 1)
        pig.act()
        assert pig.last_action == "RunFromWolf"
        assert pig.position in (Position(0, 1), Position(1, 0))

    def test_wolf_far_away_is_ignored(self, world: World) -> None:
        pig = _place(world, BoyPig(), 0, 0)
        _place(world, Wolf(), 8, 8)
        world.step()
        assert pig.last_action != "RunFromWolf"

    def test_tired_pig_rests(self, world: World) -> None:
        pig = _place(world, BoyPig(), 4, 5)
        _place(world, Wolf(), 0, 0)
        pig.sleep(3)
        world.step()
        assert pig.last_action == "Rest"
        assert pig.tiredness == 2
        assert pig.position == Position(4, 5)


class TestCourting:
    """Tests for grunting, listening and making piglets."""

    def test_girl_grunts_every_sixth_tick(self, world: World) -> None:
        world.enable_audio = True
        girl = _place(world, _in_love(GirlPig()), 4, 4)
        queue = EventQueue(world.bus, types=(EventType.SOUND_PLAYED,))
        world.run(5)
        assert world.sound_level(Position(4, 4)) == 0
        assert not girl.is_grunting

        world.step()
        assert girl.last_action == "LookForPig"
        assert world.sound_level(Position(4, 4)) == OINK_SOUND_LEVEL
        assert world.sound_level(Position(4, 5)) == OINK_SOUND_LEVEL - 1
        assert girl.is_grunting
        assert [e.data["name"] for e in queue.drain()] == ["grunt"]

        world.run(2)
        assert not girl.is_grunting

    def test_boy_follows_the_sound(self, world: World) -> None:
        boy = _place(world, _in_love(BoyPig()), 4, 4)
        world.cell_at(Position(4, 7)).air.transmit(OINK_SOUND_LEVEL)
        world.step()
        assert boy.last_action == "LookForPig"
        assert boy.position == Position(3, 5)
        assert world.distance(boy, world.cell_at(Position(4, 7))) == 2

    def test_boy_wanders_in_silence(self, world: World) -> None:
        boy = _place(world, _in_love(BoyPig()), 4, 4)
        world.step()
        assert boy.last_action == "Wander"
        assert boy.position != Position(4, 4)

    def test_boy_meets_girl(self, world: World) -> None:
        girl = _place(world, _in_love(GirlPig()), 4, 4)
        boy = _place(world, _in_love(BoyPig()), 4, 5)
        world.cell_at(Position(4, 4)).air.transmit(OINK_SOUND_LEVEL)

        world.step()
        assert world.count(Kind.PIG) == 3
        baby = world.entities()[-1]
        assert isinstance(baby, Pig)
        assert baby.mother_id == girl.id
        assert baby.father_id == boy.id
        assert baby.position == Position(3, 4)
        assert girl.tiredness == 5
        assert boy.tiredness == 5
        assert girl.energy == STOMACH_FULL_LEVEL - 1 - STOMACH_EMPTY_LEVEL
        assert boy.energy == STOMACH_FULL_LEVEL - STOMACH_EMPTY_LEVEL - 1

    def test_rejected_boy_still_pays(self, world: World) -> None:
        girl = _place(world, _in_love(GirlPig()), 4, 4)
        girl.sleep(10)
        boy = _place(world, _in_love(BoyPig()), 4, 5)
        world.cell_at(Position(4, 4)).air.transmit(OINK_SOUND_LEVEL)
        world.step()
        assert world.count(Kind.PIG) == 2
        assert boy.tiredness == 5


class TestMating:
    """Tests for GirlPig.try_to_make_baby."""

    @pytest.fixture
    def parents(self, world: World) -> tuple[GirlPig, BoyPig]:
        mother = _place(world, _in_love(GirlPig()), 0, 0)
        father = _place(world, _in_love(BoyPig()), 0, 8)
        return mother, father

    def test_unrelated_pigs_have_a_piglet(self, world: World, events: EventQueue) -> None:
        world.enable_audio = True
        girl = _place(world, _in_love(GirlPig()), 4, 4)
        boy = _place(world, _in_love(BoyPig()), 4, 5)
        events.drain()

        assert girl.try_to_make_baby(boy)
        added = [e.data["entity"] for e in events.drain() if e.type is EventType.ENTITY_ADDED]
        assert len(added) == 1
        baby = added[0]
        assert baby.id == 3
        assert baby.kind in (Kind.BOY_PIG, Kind.GIRL_PIG)
        assert baby.position == Position(3, 4)
        assert girl.energy == STOMACH_FULL_LEVEL - STOMACH_EMPTY_LEVEL
        assert girl.tiredness == 5

    def test_full_siblings_never_mate(
        self,
        world: World,
        parents: tuple[GirlPig, BoyPig],
    ) -> None:
        mother, father = parents
        sister = _place(world, _in_love(GirlPig(mother_id=mother.id, father_id=father.id)), 4, 4)
        brother = _place(world, _in_love(BoyPig(mother_id=mother.id, father_id=father.id)), 4, 5)
        assert sister.is_sibling(brother)
        assert not sister.try_to_make_baby(brother)
        assert world.count(Kind.PIG) == 4

    def test_half_siblings_may_mate(
        self,
        world: World,
        parents: tuple[GirlPig, BoyPig],
    ) -> None:
        mother, father = parents
        sister = _place(world, _in_love(GirlPig(mother_id=mother.id, father_id=father.id)), 4, 4)
        brother = _place(world, _in_love(BoyPig(mother_id=mother.id)), 4, 5)
        assert not sister.is_sibling(brother)
        assert sister.try_to_make_baby(brother)

    def test_parent_and_child_never_mate(
        self,
        world: World,
        parents: tuple[GirlPig, BoyPig],
    ) -> None:
        mother, father = parents
        son = _place(world, _in_love(BoyPig(mother_id=mother.id, father_id=father.id)), 1, 1)
        daughter = _place(world, _in_love(GirlPig(mother_id=mother.id, father_id=father.id)), 1, 7)
        assert not mother.try_to_make_baby(son)
        assert not daughter.try_to_make_baby(father)

    def test_tired_or_hungry_pigs_refuse(self, world: World) -> None:
        girl = _place(world, _in_love(GirlPig()), 4, 4)
        boy = _place(world, _in_love(BoyPig()), 4, 5)
        girl.sleep(1)
        assert not girl.try_to_make_baby(boy)
        girl.wake_up()
        boy.use_energy(STOMACH_FULL_LEVEL)
        assert not girl.try_to_make_baby(boy)
        assert world.count(Kind.PIG) == 2


class TestWolf:
    def test_wolf_eats_adjacent_pig(self, world: World) -> None:
        wolf = _place(world, Wolf(), 0, 0)
        pig = _place(world, BoyPig(), 0, 1)
        pig.drop_rope()
        world.step()
        assert not pig.exists
        assert world.entity(2) is None
        assert world.count(Kind.ROPE_PIECE) == 0
        assert wolf.position == Position(0, 1)

    def test_wolf_closes_in(self, world: World) -> None:
        wolf = _place(world, Wolf(), 0, 0)
        _place(world, BoyPig(), 4, 4)
        wolf.act()
        assert wolf.position == Position(1, 1)
        assert wolf.last_action == "Hunt"

    def test_wolf_blocked_by_wall(self, world: World) -> None:
        wolf = _place(world, Wolf(), 0, 0)
        pig = _place(world, BoyPig(), 0, 1)
        world.fill_vertical_gap(0, 0)
        wolf.act()
        assert pig.exists
        assert wolf.position == Position(0, 0)

    def test_wolf_does_not_eat_trees(self, world: World) -> None:
        wolf = _place(world, Wolf(), 0, 0)
        tree = _place(world, Tree(), 0, 1)
        _place(world, BoyPig(), 0, 5)
        wolf.act()
        assert tree.exists
        assert wolf.position == Position(0, 0)


class TestTree:
    def test_drops_food_every_tenth_tick(self, world: World) -> None:
        tree = _place(world, Tree(), 4, 4)
        world.run(FOOD_DROP_PERIOD - 1)
        assert world.count(Kind.PIG_FOOD) == 0
        world.step()
        assert world.count(Kind.PIG_FOOD) == 1
        # nothing lies under a tree, so the food lands on the first neighbour
        assert len(world.items_at(Position(3, 4), Kind.PIG_FOOD)) == 1
        assert tree.ticks_since_drop == 0

    def test_nearby_pig_stops_drop(self, world: World) -> None:
        _place(world, Tree(), 4, 4)
        pig = _place(world, BoyPig(), 4, 5)
        pig.sleep()
        world.run(FOOD_DROP_PERIOD)
        assert world.count(Kind.PIG_FOOD) == 0

    def test_tree_cannot_stand_on_food(self, world: World) -> None:
        _place(world, PigFood(), 4, 4)
        tree = _place(world, Tree(), 4, 4)
        assert tree.position == Position(3, 4)
