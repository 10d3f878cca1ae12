"""
Tests for the operator delegation export
"""

import json

import pytest

from reimbursement_pipeline.services.readers.operator_delegations import (
    EXPORT_COLUMNS,
    OperatorDelegationsReader,
)

from conftest import FakeSubgraph

ETHER = 10**18


def operator(op_id, name=None, delegations=(), metadata=None):
    return {
        "id": op_id,
        "owner": "0xOwner",
        "metadataJsonString": metadata if metadata is not None else json.dumps({"name": name}),
        "operatorTokenTotalSupplyWei": str(10 * ETHER),
        "valueWithoutEarnings": str(12 * ETHER),
        "delegations": [
            {"delegator": {"id": delegator}, "operatorTokenBalanceWei": str(balance)}
            for delegator, balance in delegations
        ],
    }


class TestOperatorDelegationsReader:
    @pytest.mark.asyncio
    async def test_rows_per_delegation(self):
        subgraph = FakeSubgraph(
            operator_list=[
                operator("0xa", "Alpha", [("0xOwner", 4 * ETHER), ("0xd1", 6 * ETHER)]),
                operator("0xb", "Beta", [("0xd2", ETHER // 2)]),
            ]
        )
        reader = OperatorDelegationsReader(subgraph, page_size=10)

        df = await reader.read_rows("1", 54335428)

        assert list(df.columns) == EXPORT_COLUMNS
        assert df.to_dict(orient="records") == [
            {
                "OperatorId": "0xa",
                "OperatorName": "Alpha",
                "Owner": "0xowner",
                "TotalOperatorTokens": "10.0",
                "DelegatorId": "0xowner",
                "DelegatorsOperatorTokens": "4.0",
            },
            {
                "OperatorId": "0xa",
                "OperatorName": "Alpha",
                "Owner": "0xowner",
                "TotalOperatorTokens": "10.0",
                "DelegatorId": "0xd1",
                "DelegatorsOperatorTokens": "6.0",
            },
            {
                "OperatorId": "0xb",
                "OperatorName": "Beta",
                "Owner": "0xowner",
                "TotalOperatorTokens": "10.0",
                "DelegatorId": "0xd2",
                "DelegatorsOperatorTokens": "0.5",
            },
        ]
        assert subgraph.calls[0][1]["block"] == 54335428
        assert subgraph.calls[0][1]["contractVersion"] == "1"

    @pytest.mark.asyncio
    async def test_pages_with_id_cursor(self):
        operators = [operator(f"0x{idx:02d}", f"op{idx}", [("0xd", ETHER)]) for idx in range(5)]
        subgraph = FakeSubgraph(operator_list=operators)
        reader = OperatorDelegationsReader(subgraph, page_size=2)

        fetched = await reader.fetch_operators("1")

        assert [op["id"] for op in fetched] == ["0x00", "0x01", "0x02", "0x03", "0x04"]
        assert [call[1]["afterId"] for call in subgraph.calls] == ["", "0x01", "0x03"]
        assert "block" not in subgraph.calls[0][1]
        assert "block:" not in subgraph.calls[0][0]

    @pytest.mark.asyncio
    async def test_invalid_metadata_gives_empty_name(self):
        subgraph = FakeSubgraph(
            operator_list=[operator("0xa", delegations=[("0xd", ETHER)], metadata="{not json")]
        )

        df = await OperatorDelegationsReader(subgraph).read_rows()

        assert df.iloc[0]["OperatorName"] == ""

    @pytest.mark.asyncio
    async def test_no_operators(self):
        df = await OperatorDelegationsReader(FakeSubgraph()).read_rows()

        assert df.empty
        assert list(df.columns) == EXPORT_COLUMNS
