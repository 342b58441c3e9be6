# -*- coding: utf-8 -*-

import copy
import unittest

from edix12 import X12


SPEC_850 = {
    '850': {
        'segments': {
            'BEG': {'definition': [
                {'name': 'purpose_code'},
                {'name': 'type_code'},
                {'name': 'po_number'},
            ]},
            'REF': {'definition': [
                {'name': 'qualifier'},
                {'name': 'reference'},
            ]},
            'PO1': {'definition': [
                {'name': 'line_number'},
                {'name': 'quantity'},
                {'name': 'unit', 'value': 'EA'},
                {'name': 'price'},
            ]},
            'PID': {'definition': [
                {'name': 'description_type', 'value': 'F'},
                {},
                {},
                {},
                {'name': 'description', 'max': 20},
            ]},
            'CTT': {'definition': [
                {'name': 'line_count'},
            ]},
            'MSG': {'definition': [
                {'name': 'text'},
            ]},
        },
        'structure': {
            'header': ['BEG', 'REF'],
            'detail': ['PO1', 'PID'],
            'footer': ['CTT'],
        },
    },
}

ISA_SAMPLE = (
    'ISA*00*          *00*          *00*SENDER         *00*RECEIVER       '
    '*210101*1200*U*00401*000000001*0*P*>~'
)
GS_SAMPLE = 'GS*PO*SENDER*RECEIVER*20210101*1200*1*X*004010~'

SAMPLE_850 = (
    ISA_SAMPLE
    + GS_SAMPLE
    + 'ST*850*0001~BEG*00*NE*PONUM~PO1*1*5*EA*10~SE*4*0001~GE*1*1~IEA*1*000000001~'
)

ISA_FIELDS = {
    'authorization_information_qualifier': '00',
    'security_information_qualifier': '00',
    'interchange_id_qualifier_1': '00',
    'interchange_id_1': 'SENDER',
    'interchange_id_qualifier_2': '00',
    'interchange_id_2': 'RECEIVER',
    'date': '210101',
    'time': '1200',
    'repetition_separator': 'U',
    'control_version_number': '00401',
    'control_number': '000000001',
    'acknowledgment_requested': '0',
    'usage_indicator': 'P',
}

GS_FIELDS = {
    'type': 'PO',
    'sender_code': 'SENDER',
    'receiver_code': 'RECEIVER',
    'date': '20210101',
    'time': '1200',
    'control_number': '1',
    'agency_code': 'X',
    'version_number': '004010',
}


class X12TestCase(unittest.TestCase):
    """Base test case: 850 schema and sample interchange."""

    spec = SPEC_850

    def make_x12(self, **kwargs):
        kwargs.setdefault('spec', copy.deepcopy(self.spec))
        return X12(**kwargs)

    def wrap(self, payload, identifier='850'):
        """put payload segments in a complete interchange"""
        return (
            ISA_SAMPLE + GS_SAMPLE + f'ST*{identifier}*0001~' + payload
            + 'SE*9*0001~GE*1*1~IEA*1*000000001~'
        )
