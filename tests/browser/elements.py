# Copyright(C) 2024 gdbrowser project
#
# This file is part of gdbrowser.
#
# gdbrowser is free software: you can redistribute it and/or modify
# it under the terms of the GNU Lesser General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# gdbrowser is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public License
# along with gdbrowser. If not, see <http://www.gnu.org/licenses/>.

from unittest import TestCase

from gdbrowser.browser.elements import DataError, DictElement, ItemElement, SkipItem, method
from gdbrowser.browser.filters.base import Env
from gdbrowser.browser.filters.record import Key
from gdbrowser.browser.filters.standard import CleanText, Eval, Field, Type
from gdbrowser.browser.pages import TextPage
from gdbrowser.capabilities.base import BaseObject, Field as ObjectField, IntField, StringField
from gdbrowser.tools.parse import parse, split_records


class MySong(BaseObject):
    name = StringField('Name of the song')


class MyLevel(BaseObject):
    name = StringField('Name of the level')
    stars = IntField('Stars')
    label = StringField('Label')
    song = ObjectField('Song', MySong)


class MyResponse:
    def __init__(self, text):
        self.url = 'http://www.boomlings.com/database/getGJLevels21.php'
        self.headers = {'content-type': 'text/html; charset=UTF-8'}
        self.encoding = None
        self.text = text


class MyBrowser:
    logger = None


class RecordsPage(TextPage):
    def parse_text(self, text):
        return [parse(record) for record in split_records(text)]


def make_page(klass, text, params=None):
    return klass(MyBrowser(), MyResponse(text), params)


class TestElements(TestCase):
    def test_iterate_over_records(self):
        class MyPage(RecordsPage):
            @method
            class iter_levels(DictElement):
                class item(ItemElement):
                    klass = MyLevel

                    obj_id = Key('1')
                    obj_name = CleanText(Key('2'))
                    obj_stars = Type(Key('18'), type=int, default=0)

        page = make_page(MyPage, '1:128:2: Bloodbath :18:10|1:129:2:Sonic  Wave')
        levels = list(page.iter_levels())
        assert [level.id for level in levels] == ['128', '129']
        assert levels[0].name == 'Bloodbath'
        assert levels[0].stars == 10
        assert levels[1].name == 'Sonic Wave'
        assert levels[1].stars == 0

    def test_item_xpath(self):
        class MyPage(TextPage):
            def parse_text(self, text):
                return {'levels': [parse(record) for record in split_records(text)]}

            @method
            class iter_levels(DictElement):
                item_xpath = 'levels'

                class item(ItemElement):
                    klass = MyLevel

                    obj_id = Key('1')

        page = make_page(MyPage, '1:1|1:2|1:3')
        assert [level.id for level in page.iter_levels()] == ['1', '2', '3']

    def test_use_filter_as_item_condition(self):
        """Use a filter as the 'condition' property of list and item elements."""
        class MyPage(RecordsPage):
            @method
            class iter_levels(DictElement):
                class item(ItemElement):
                    klass = MyLevel

                    condition = Eval(lambda stars: int(stars) % 2 == 0, Key('18'))

                    obj_id = Key('1')

        page = make_page(MyPage, '1:1:18:2|1:2:18:3|1:3:18:4')
        assert [level.id for level in page.iter_levels()] == ['1', '3']

    def test_condition_false(self):
        class MyPage(RecordsPage):
            @method
            class iter_levels(DictElement):
                condition = False

                class item(ItemElement):
                    klass = MyLevel

                    obj_id = Key('1')

        page = make_page(MyPage, '1:1|1:2')
        assert list(page.iter_levels()) == []

    def test_duplicates(self):
        class MyPage(RecordsPage):
            @method
            class iter_levels(DictElement):
                class item(ItemElement):
                    klass = MyLevel

                    obj_id = Key('1')

            @method
            class iter_unique_levels(iter_levels.klass):
                ignore_duplicate = True

        page = make_page(MyPage, '1:1|1:2|1:1')
        with self.assertRaises(DataError):
            list(page.iter_levels())

        assert [level.id for level in page.iter_unique_levels()] == ['1', '2']

    def test_skip_item_and_validate(self):
        class MyPage(RecordsPage):
            @method
            class iter_levels(DictElement):
                class item(ItemElement):
                    klass = MyLevel

                    obj_id = Key('1')
                    obj_stars = Type(Key('18'), type=int)

                    def obj_name(self):
                        if self.el['1'] == '2':
                            raise SkipItem()
                        return 'level %s' % self.el['1']

                    def validate(self, obj):
                        return obj.stars > 0

        page = make_page(MyPage, '1:1:18:5|1:2:18:5|1:3:18:0|1:4:18:1')
        levels = list(page.iter_levels())
        assert [level.id for level in levels] == ['1', '4']
        assert levels[1].name == 'level 4'

    def test_attribute_order(self):
        """Constants are set first, then filters, then methods."""
        class MyPage(RecordsPage):
            @method
            class get_level(ItemElement):
                klass = MyLevel

                def obj_label(self):
                    return '%s (%s)' % (self.obj.name, self.obj.stars)

                obj_name = Key('2')
                obj_stars = 10
                obj_id = Eval(lambda name, level_id: '%s-%s' % (name, level_id), Field('name'), Key('1'))

        page = make_page(MyPage, '1:128:2:Bloodbath')
        # a single record is the document of the item
        page.doc = page.doc[0]
        level = page.get_level()
        assert level.id == 'Bloodbath-128'
        assert level.label == 'Bloodbath (10)'

    def test_nested_item(self):
        class MyPage(RecordsPage):
            @method
            class get_level(ItemElement):
                klass = MyLevel

                obj_id = Key('1')

                class obj_song(ItemElement):
                    klass = MySong

                    obj_id = Key('35')
                    obj_name = Key('36', default='unknown')

        page = make_page(MyPage, '1:128:35:467339')
        page.doc = page.doc[0]
        level = page.get_level()
        assert isinstance(level.song, MySong)
        assert level.song.id == '467339'
        assert level.song.name == 'unknown'

    def test_env(self):
        """Page parameters and call arguments are in the environment."""
        class MyPage(RecordsPage):
            @method
            class iter_levels(DictElement):
                class item(ItemElement):
                    klass = MyLevel

                    obj_id = Key('1')
                    obj_name = Env('author')
                    obj_label = Env('label', default='none')

        page = make_page(MyPage, '1:1|1:2', params={'author': 'RobTop'})
        levels = list(page.iter_levels())
        assert [level.name for level in levels] == ['RobTop', 'RobTop']
        assert levels[0].label == 'none'

        levels = list(page.iter_levels(label='official'))
        assert levels[0].label == 'official'

    def test_fill_given_object(self):
        class MyPage(RecordsPage):
            @method
            class fill_level(ItemElement):
                obj_stars = Type(Key('18'), type=int)

        page = make_page(MyPage, '18:3')
        page.doc = page.doc[0]
        level = MyLevel('1')
        level.name = 'Stereo Madness'
        assert page.fill_level(level) is level
        assert level.stars == 3
        assert level.name == 'Stereo Madness'
