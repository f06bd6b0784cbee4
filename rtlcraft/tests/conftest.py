import os
import sys

import pytest

# Add the project root to sys.path so that rtlcraft is importable
# This is needed because of the flat layout structure
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

COUNTER_VHDL = """
library ieee;
use ieee.std_logic_1164.all;
use ieee.numeric_std.all;

-- Simple 8-bit counter
entity counter is
    port (
        clk    : in  std_logic;
        reset  : in  std_logic;
        enable : in  std_logic;
        count  : out std_logic_vector(7 downto 0)
    );
end entity counter;

architecture rtl of counter is
    signal count_reg : unsigned(7 downto 0);
begin
    process (clk, reset)
    begin
        if reset = '1' then
            count_reg <= (others => '0');
        elsif rising_edge(clk) then
            if enable = '1' then
                count_reg <= count_reg + 1;
            end if;
        end if;
    end process;

    count <= std_logic_vector(count_reg);
end architecture rtl;
"""

FSM_VHDL = """
library ieee;
use ieee.std_logic_1164.all;

entity fsm is
    generic (
        WIDTH : integer := 8;
        DEPTH : natural := 16
    );
    port (
        clk, rst_n : in  std_logic;
        start      : in  std_logic;
        data       : out std_logic_vector(WIDTH-1 downto 0);
        busy       : buffer std_logic
    );
end fsm;

architecture behavioral of fsm is
    type state_t is (IDLE, RUN, DONE);
    signal state : state_t;
    constant MAX : integer := 255;
begin
    ctrl : process (clk, rst_n) is
    begin
        if rst_n = '0' then
            state <= IDLE;
        elsif rising_edge(clk) then
            case state is
                when IDLE =>
                    if start = '1' then
                        state <= RUN;
                    end if;
                when RUN =>
                    state <= DONE;
                when others =>
                    null;
            end case;
        end if;
    end process ctrl;

    busy <= '1' when state = RUN else '0';

    u_core : entity work.core port map (clk => clk, q => data);
end architecture behavioral;
"""

SELECT_VHDL = """
entity mux4 is
    generic (N : positive := 4);
    port (
        sel : in  std_logic_vector(1 downto 0);
        a, b, c, d : in  std_logic_vector(0 to 3);
        y   : out std_logic_vector(3 downto 0);
        z   : out std_logic
    );
end entity mux4;

architecture rtl of mux4 is
    signal tmp : std_logic_vector(3 downto 0) := (others => '0');
begin
    with sel select
        y <= a when "00",
             b when "01",
             c when others;

    drive_z: z <= tmp(0) when sel = "11" else
                  '0';

    comb : process (all)
    begin
        tmp <= d;
    end process;
end architecture rtl;
"""

MULTI_VHDL = """
entity leaf is
end entity leaf;

entity top is
    port (x : in bit; y : out bit);
end top;

architecture a1 of top is
begin
    y <= not x;
end a1;

architecture a2 of top is
begin
    y <= x;
end a2;
"""


GENERATE_VHDL = """
library ieee;
use ieee.std_logic_1164.all;
use ieee.numeric_std.all;

entity shifter is
    generic (N : positive := 4);
    port (
        clk : in  std_logic;
        d   : in  std_logic_vector(3 downto 0);
        q   : out std_logic_vector(3 downto 0);
        sum : out std_logic_vector(3 downto 0)
    );
end entity shifter;

architecture rtl of shifter is
    signal r : std_logic_vector(3 downto 0);
    signal unused : std_logic_vector(3 downto 0);

    function parity(v : std_logic_vector) return std_logic is
        variable p : std_logic := '0';
    begin
        for i in v'range loop
            p := p xor v(i);
        end loop;
        return p;
    end function parity;

    procedure check(signal s : in std_logic) is
    begin
        null;
    end procedure;
begin
    g_bits : for i in 0 to 3 generate
        process (clk)
        begin
            if rising_edge(clk) then
                r(i) <= d(i);
            end if;
        end process;
    end generate g_bits;

    acc : process (clk)
        variable total : unsigned(3 downto 0);
    begin
        if rising_edge(clk) then
            total := total + unsigned(d);
            sum <= std_logic_vector(total);
        end if;
    end process acc;

    q <= r;

    b_sync : block
    begin
        unused <= d;
    end block b_sync;

    assert N > 0 report "N must be positive" severity failure;

    check(clk);
end architecture rtl;
"""


@pytest.fixture
def counter_vhdl():
    """Counter entity with an asynchronous active-high reset."""
    return COUNTER_VHDL


@pytest.fixture
def fsm_vhdl():
    """State machine with generics, an enum type, a case statement and an instance."""
    return FSM_VHDL


@pytest.fixture
def select_vhdl():
    return SELECT_VHDL


@pytest.fixture
def multi_vhdl():
    """Two entities, one of them with two architectures."""
    return MULTI_VHDL


@pytest.fixture
def generate_vhdl():
    """Generate and block regions, a concurrent assertion, a procedure call and subprograms."""
    return GENERATE_VHDL
