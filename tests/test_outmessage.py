# -*- coding: utf-8 -*-

import copy
import unittest

from edix12 import ConfigurationError, DetailLoop, FunctionalGroup, Interchange, TransactionSet
from edix12.lexer import lex

from . import GS_FIELDS, ISA_FIELDS, SAMPLE_850, X12TestCase

ENCODED_850 = (
    'ISA*00*          *00*          *00*SENDER         *00*RECEIVER       '
    '*210101*1200*U*00401*000000001*0*P*>~'
    'GS*PO*SENDER   *RECEIVER *20210101*1200*000000001*X*004010~'
    'ST*850*0001~BEG*00*NE*PONUM~PO1*1*5*EA*10~SE*4*0001~GE*1*000000001~IEA*1*000000001~'
)


def segments(text, tag):
    return [segment for segment in lex(text) if segment[0] == tag]


def full_interchange():
    """Interchange with every field in normalised form: reads back the same."""
    return Interchange(
        isa=dict(ISA_FIELDS),
        groups=[FunctionalGroup(
            fields=dict(GS_FIELDS, control_number='000000001'),
            sets=[TransactionSet(
                fields={'identifier_code': '850', 'control_number': '0001'},
                header={
                    'BEG': {'purpose_code': '00', 'type_code': 'NE', 'po_number': 'PONUM'},
                    'REF': {'qualifier': 'DP', 'reference': '038'},
                },
                detail_loops=[
                    DetailLoop({
                        'PO1': {'line_number': '1', 'quantity': '5', 'unit': 'EA', 'price': '10'},
                        'PID': {'description_type': 'F', 'description': 'Blue'},
                    }),
                    DetailLoop({
                        'PO1': {'line_number': '2', 'quantity': '1', 'unit': 'CS', 'price': ''},
                    }),
                ],
                footer={'CTT': {'line_count': '2'}},
            )],
        )],
    )


class TestWriteSample(X12TestCase):

    def test_sample(self):
        x12 = self.make_x12()
        self.assertEqual(x12.encode(x12.decode(SAMPLE_850)), ENCODED_850)

    def test_se_total(self):
        x12 = self.make_x12()
        self.assertEqual(segments(x12.encode(x12.decode(SAMPLE_850)), 'SE'), [['SE', '4', '0001']])

    def test_stable(self):
        x12 = self.make_x12()
        first = x12.encode(x12.decode(SAMPLE_850))
        self.assertEqual(x12.encode(x12.decode(first)), first)

    def test_new_lines(self):
        text = self.make_x12(new_lines=True).encode(self.make_x12().decode(SAMPLE_850))
        self.assertEqual(text, ENCODED_850.replace('~', '~\n'))

    def test_delimiters(self):
        text = self.make_x12(terminator='|', separator='^').encode(self.make_x12().decode(SAMPLE_850))
        self.assertEqual(text, ENCODED_850.replace('*', '^').replace('~', '|'))

    def test_dict_form(self):
        x12 = self.make_x12()
        interchange = x12.decode(SAMPLE_850)
        self.assertEqual(x12.write_record(interchange.to_dict()), ENCODED_850)


class TestWriteOrder(X12TestCase):

    def test_structure_order(self):
        interchange = full_interchange()
        transaction_set = interchange.groups[0].sets[0]
        transaction_set.header = {
            'REF': transaction_set.header['REF'],
            'BEG': transaction_set.header['BEG'],
        }
        transaction_set.detail_loops[0] = DetailLoop({
            'PID': transaction_set.detail_loops[0]['PID'],
            'PO1': transaction_set.detail_loops[0]['PO1'],
        })
        tags = [segment[0] for segment in lex(self.make_x12().encode(interchange))]
        self.assertEqual(
            tags,
            ['ISA', 'GS', 'ST', 'BEG', 'REF', 'PO1', 'PID', 'PO1', 'CTT', 'SE', 'GE', 'IEA'],
        )

    def test_absent_segments_not_written(self):
        interchange = full_interchange()
        transaction_set = interchange.groups[0].sets[0]
        del transaction_set.header['REF']
        transaction_set.footer = {}
        text = self.make_x12().encode(interchange)
        self.assertEqual(segments(text, 'REF'), [])
        self.assertEqual(segments(text, 'CTT'), [])
        self.assertEqual(segments(text, 'SE'), [['SE', '6', '0001']])

    def test_static_values(self):
        interchange = full_interchange()
        interchange.groups[0].sets[0].detail_loops = [DetailLoop({'PO1': {'line_number': '1'}, 'PID': {}})]
        text = self.make_x12().encode(interchange)
        self.assertEqual(segments(text, 'PO1'), [['PO1', '1', '', 'EA', '']])
        self.assertEqual(segments(text, 'PID'), [['PID', 'F', '', '', '', '']])

    def test_max_applied(self):
        interchange = full_interchange()
        interchange.groups[0].sets[0].detail_loops[0]['PID']['description'] = 'A very long description text'
        text = self.make_x12().encode(interchange)
        self.assertEqual(segments(text, 'PID')[0][-1], 'A very long descript')

    def test_truncate_null(self):
        text = self.make_x12(truncate_null=True).encode(full_interchange())
        self.assertEqual(segments(text, 'PO1')[1], ['PO1', '2', '1', 'CS'])
        self.assertEqual(segments(text, 'PID'), [['PID', 'F', '', '', '', 'Blue']])


class TestControlNumbers(X12TestCase):

    def interchange(self):
        isa = dict(ISA_FIELDS)
        del isa['control_number']
        return Interchange(isa=isa, groups=[
            FunctionalGroup(fields={'type': 'PO'}, sets=[
                TransactionSet(
                    fields={'identifier_code': '850'},
                    header={'BEG': {'purpose_code': '00', 'type_code': 'NE', 'po_number': '1'}},
                ),
                TransactionSet(fields={'identifier_code': '850'}),
            ]),
            FunctionalGroup(fields={'type': 'PO'}, sets=[
                TransactionSet(fields={'identifier_code': '850', 'control_number': '77'}),
            ]),
        ])

    def test_defaults(self):
        text = self.make_x12().encode(self.interchange())
        self.assertEqual(lex(text)[0][13], '000000001')
        self.assertEqual(
            [segment[1:] for segment in segments(text, 'ST')],
            [['850', '0001'], ['850', '0002'], ['850', '0077']],
        )
        self.assertEqual(
            [segment[1:] for segment in segments(text, 'SE')],
            [['3', '0001'], ['2', '0002'], ['2', '0077']],
        )
        self.assertEqual(
            [segment[1:] for segment in segments(text, 'GE')],
            [['2', '000000001'], ['1', '000000002']],
        )
        self.assertEqual(segments(text, 'IEA'), [['IEA', '2', '000000001']])

    def test_tree_not_changed(self):
        interchange = self.interchange()
        before = copy.deepcopy(interchange)
        self.make_x12().encode(interchange)
        self.assertEqual(interchange, before)
        self.assertNotIn('control_number', interchange.isa)
        self.assertNotIn('control_number', interchange.groups[0].sets[0].fields)

    def test_empty_interchange(self):
        text = self.make_x12().encode(Interchange())
        tags = [segment[0] for segment in lex(text)]
        self.assertEqual(tags, ['ISA', 'IEA'])
        self.assertEqual(segments(text, 'IEA'), [['IEA', '0', '000000001']])


class TestWriteErrors(X12TestCase):

    def test_unknown_transaction_set(self):
        interchange = full_interchange()
        interchange.groups[0].sets[0].fields['identifier_code'] = '810'
        with self.assertRaises(ConfigurationError):
            self.make_x12().encode(interchange)

    def test_no_identifier_code(self):
        interchange = Interchange(groups=[FunctionalGroup(sets=[TransactionSet()])])
        with self.assertRaises(ConfigurationError):
            self.make_x12().encode(interchange)


class TestRoundTrip(X12TestCase):

    def test_round_trip(self):
        x12 = self.make_x12()
        interchange = full_interchange()
        self.assertEqual(x12.decode(x12.encode(interchange)), interchange)

    def test_round_trip_options(self):
        interchange = full_interchange()
        for options in ({'new_lines': True}, {'truncate_null': True}, {'terminator': '\'', 'separator': '+'}):
            with self.subTest(**options):
                x12 = self.make_x12(**options)
                self.assertEqual(x12.decode(x12.encode(interchange)), interchange)

    def test_shared_instance_keeps_schema(self):
        x12 = self.make_x12()
        before = x12.encode(full_interchange())
        short = full_interchange()
        short.groups[0].sets[0].header['BEG']['po_number'] = '1'
        x12.encode(short)
        self.assertEqual(x12.encode(full_interchange()), before)


if __name__ == '__main__':
    unittest.main()
